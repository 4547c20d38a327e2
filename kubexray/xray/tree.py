"""Tree nodes for the resource-relationship view.

A tree is rebuilt from scratch on every refresh. Nodes are never removed;
after construction only ``extras`` changes.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from enum import StrEnum
from typing import Any

from kubexray.models.resources import GVR, namespaced

STATUS_KEY = "status"


class StatusKind(StrEnum):
    """Resolution status recorded under ``extras[STATUS_KEY]``."""

    OK = "Ok"
    MISSING_REF = "MissingRef"
    TOAST = "Toast"


class TreeNode:
    """A node in the xray tree, identified by ``(gvr, id)``.

    Children are owned exclusively by their parent. ``find`` only looks at
    direct children; it exists so callers can skip duplicates before ``add``.
    """

    def __init__(self, gvr: GVR, id: str) -> None:
        self.gvr = gvr
        self.id = id
        self.children: list[TreeNode] = []
        self.extras: dict[str, str] = {}
        self.parent: TreeNode | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"TreeNode({self.gvr}, {self.id!r}, children={len(self.children)})"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add(self, child: TreeNode) -> None:
        """Append *child*. No identity check is made here."""
        with self._lock:
            child.parent = self
            self.children.append(child)

    def find(self, gvr: GVR, id: str) -> TreeNode | None:
        """Return the direct child with identity ``(gvr, id)``, if any."""
        with self._lock:
            return self._find_locked(gvr, id)

    def add_if_absent(self, child: TreeNode) -> TreeNode:
        """Attach *child* unless a sibling with the same identity exists.

        Returns the node that ends up attached, which is the existing sibling
        when one was found.
        """
        with self._lock:
            existing = self._find_locked(child.gvr, child.id)
            if existing is not None:
                return existing
            child.parent = self
            self.children.append(child)
            return child

    def _find_locked(self, gvr: GVR, id: str) -> TreeNode | None:
        for c in self.children:
            if c.gvr == gvr and c.id == id:
                return c
        return None

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def status(self) -> str | None:
        return self.extras.get(STATUS_KEY)

    def set_status(self, status: StatusKind) -> None:
        self.extras[STATUS_KEY] = status.value

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_leaf(self) -> bool:
        return not self.children

    def root(self) -> TreeNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def level(self) -> int:
        """Depth of this node, the root being level 0."""
        depth, node = 0, self
        while node.parent is not None:
            depth += 1
            node = node.parent
        return depth

    def title(self) -> str:
        _, name = namespaced(self.id)
        return name

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and its descendants depth-first, pre-order."""
        yield self
        for c in list(self.children):
            yield from c.walk()

    def count(self, gvr: GVR) -> int:
        """Count descendants (self excluded) of the given kind."""
        return sum(1 for n in self.walk() if n is not self and n.gvr == gvr)

    def sort(self) -> None:
        """Order children by ``(gvr, id)``, recursively."""
        with self._lock:
            self.children.sort(key=lambda n: (str(n.gvr), n.id))
        for c in self.children:
            c.sort()

    def dump(self) -> dict[str, Any]:
        """Nested plain-data form consumed by the rendering pipeline."""
        out: dict[str, Any] = {"gvr": str(self.gvr), "id": self.id}
        if self.extras:
            out["extras"] = dict(self.extras)
        if self.children:
            out["children"] = [c.dump() for c in self.children]
        return out
