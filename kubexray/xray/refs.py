"""Reference resolution against live cluster state.

A dangling reference is data, not an error: it is recorded on the node so
the tree can show it, and rendering of everything else carries on.
"""

from __future__ import annotations

from kubexray.factory.base import Factory
from kubexray.models.resources import GVR, LabelSelector
from kubexray.observability.logging import get_logger
from kubexray.xray.tree import StatusKind, TreeNode

_logger = get_logger("xray.refs")


async def add_ref(
    factory: Factory,
    parent: TreeNode,
    gvr: GVR,
    id: str,
    optional: bool | None,
) -> None:
    """Resolve ``(gvr, id)`` and attach it under *parent* unless already there.

    The lookup runs without holding the parent's lock; only the final
    find-and-add is atomic.
    """
    if parent.find(gvr, id) is not None:
        return
    n = TreeNode(gvr, id)
    await validate(factory, n, optional)
    parent.add_if_absent(n)


async def validate(factory: Factory, node: TreeNode, optional: bool | None) -> None:
    """Mark *node* ``Ok`` or ``MissingRef`` from a fresh lookup. Never raises."""
    error: Exception | None = None
    try:
        res = await factory.get(node.gvr, node.id, True, LabelSelector.everything())
    except Exception as exc:  # noqa: BLE001
        res, error = None, exc

    if res is None:
        if not optional:
            kv: dict[str, str] = {"gvr": str(node.gvr), "id": node.id}
            if error is not None:
                kv["error"] = str(error)
            _logger.warning("missing_ref", **kv)
            node.set_status(StatusKind.MISSING_REF)
        return
    node.set_status(StatusKind.OK)
