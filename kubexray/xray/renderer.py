"""Renderer contract and registry.

Every object kind gets one ``Renderer``. The traversal driver looks the
renderer up by kind and hands it an explicit ``RenderContext`` holding the
live-state accessor and the parent node to attach discoveries to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import ClassVar

from kubexray.factory.base import Factory
from kubexray.models.resources import GVR
from kubexray.xray.errors import MissingContextError, TypeMismatchError, UnknownKindError
from kubexray.xray.tree import TreeNode


@dataclass(frozen=True)
class RenderContext:
    """Dependencies a renderer needs, passed explicitly."""

    factory: Factory | None
    parent: TreeNode | None

    def require(self) -> tuple[Factory, TreeNode]:
        """Return ``(factory, parent)`` or raise MissingContextError."""
        if self.factory is None:
            raise MissingContextError("factory")
        if not isinstance(self.parent, TreeNode):
            raise MissingContextError("parent TreeNode")
        return self.factory, self.parent

    def with_parent(self, parent: TreeNode) -> RenderContext:
        return replace(self, parent=parent)


class Renderer(ABC):
    """Discovers the references of one object kind and attaches them as nodes."""

    expects: ClassVar[type] = dict

    def check_type(self, obj: object) -> None:
        if not isinstance(obj, self.expects):
            raise TypeMismatchError(self.expects.__name__, obj)

    @abstractmethod
    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        """Attach a node for *obj*, with its resolved references, under ``ctx.parent``.

        Raises:
            TypeMismatchError:   *obj* is not of type ``expects``.
            MissingContextError: *ctx* lacks the factory or the parent node.
        """


class RendererRegistry:
    """Maps a kind (``str(GVR)``) to its renderer."""

    def __init__(self) -> None:
        self._renderers: dict[str, Renderer] = {}

    def register(self, gvr: GVR | str, renderer: Renderer) -> None:
        self._renderers[str(gvr)] = renderer

    def get(self, gvr: GVR | str) -> Renderer:
        try:
            return self._renderers[str(gvr)]
        except KeyError:
            raise UnknownKindError(str(gvr)) from None

    def kinds(self) -> list[str]:
        return sorted(self._renderers)

    def __contains__(self, gvr: object) -> bool:
        return str(gvr) in self._renderers
