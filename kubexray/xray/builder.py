"""Traversal driver: renders a batch of objects of one kind into a tree.

Sibling objects are rendered concurrently. A renderer failing on one object
is logged and skipped; the rest of the tree is still built. An optional
deadline aborts queries still in flight but keeps every subtree that was
already attached.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from kubexray.factory.base import Factory
from kubexray.models.resources import (
    CM_GVR,
    CO_GVR,
    DP_GVR,
    GVR,
    JOB_GVR,
    POD_GVR,
    PVC_GVR,
    RS_GVR,
    SA_GVR,
    SEC_GVR,
    STS_GVR,
    SVC_GVR,
    fqn,
)
from kubexray.observability.logging import build_context, get_logger
from kubexray.xray.container import ContainerRenderer
from kubexray.xray.errors import XrayError
from kubexray.xray.pod import PodRenderer
from kubexray.xray.renderer import RenderContext, Renderer, RendererRegistry
from kubexray.xray.service_account import LeafRenderer, ServiceAccountRenderer
from kubexray.xray.tree import TreeNode
from kubexray.xray.workload import (
    WorkloadRenderer,
    cronjob_renderer,
    daemonset_renderer,
    job_renderer,
)

_logger = get_logger("xray.builder")


def default_registry() -> RendererRegistry:
    """Registry holding every built-in renderer."""
    reg = RendererRegistry()
    reg.register(CO_GVR, ContainerRenderer())
    reg.register(POD_GVR, PodRenderer())
    reg.register(SA_GVR, ServiceAccountRenderer())
    for gvr in (DP_GVR, STS_GVR, RS_GVR):
        reg.register(gvr, WorkloadRenderer(gvr))
    ds = daemonset_renderer()
    reg.register(ds.gvr, ds)
    reg.register(JOB_GVR, job_renderer(JOB_GVR))
    cj = cronjob_renderer()
    reg.register(cj.gvr, cj)
    for gvr in (CM_GVR, SEC_GVR, PVC_GVR, SVC_GVR):
        reg.register(gvr, LeafRenderer(gvr))
    return reg


class TreeBuilder:
    """Builds a fresh xray tree per call; trees are never patched in place."""

    def __init__(self, factory: Factory, registry: RendererRegistry | None = None) -> None:
        self._factory = factory
        self._registry = registry or default_registry()

    @property
    def registry(self) -> RendererRegistry:
        return self._registry

    async def build(
        self,
        gvr: GVR,
        ns: str,
        objects: Iterable[object],
        timeout: float | None = None,
    ) -> TreeNode:
        """Render *objects* of kind *gvr* under a new root node.

        Raises:
            UnknownKindError: no renderer is registered for *gvr*.
        """
        renderer = self._registry.get(gvr)
        # "ns/" so children resolve references in ns.
        root = TreeNode(gvr, fqn(ns, ""))
        ctx = RenderContext(factory=self._factory, parent=root)

        with build_context(str(gvr), ns):
            try:
                async with asyncio.timeout(timeout):
                    await asyncio.gather(*(self._render_one(renderer, ctx, gvr, ns, o) for o in objects))
            except TimeoutError:
                _logger.warning(
                    "build_deadline_exceeded",
                    gvr=str(gvr),
                    timeout=timeout,
                    rendered=len(root.children),
                )

        root.sort()
        return root

    async def _render_one(
        self,
        renderer: Renderer,
        ctx: RenderContext,
        gvr: GVR,
        ns: str,
        obj: object,
    ) -> None:
        try:
            await renderer.render(ctx, ns, obj)
        except XrayError as exc:
            _logger.error("render_failed", gvr=str(gvr), ns=ns, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            _logger.error("render_failed", gvr=str(gvr), ns=ns, error=str(exc), exc_info=True)
