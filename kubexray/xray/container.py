"""Container renderer: environment references to secrets and config maps."""

from __future__ import annotations

from typing import Any

from kubexray.factory.base import Factory
from kubexray.models.resources import CM_GVR, CO_GVR, GVR, SEC_GVR, ContainerRes, fqn, namespaced
from kubexray.xray.refs import add_ref
from kubexray.xray.renderer import RenderContext, Renderer
from kubexray.xray.tree import StatusKind, TreeNode


class ContainerRenderer(Renderer):
    """Renders a ``ContainerRes`` and the objects its environment points at."""

    expects = ContainerRes

    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        self.check_type(obj)
        assert isinstance(obj, ContainerRes)
        f, parent = ctx.require()

        root = TreeNode(CO_GVR, fqn(ns, obj.name))
        # References live in the owner's namespace, whatever ns we were given.
        pns, _ = namespaced(parent.id)
        await self._env_refs(f, root, pns, obj.container)
        if obj.status is not None:
            root.set_status(_container_status(obj.status))
        parent.add(root)

    async def _env_refs(self, f: Factory, parent: TreeNode, ns: str, co: dict[str, Any]) -> None:
        for e in co.get("env") or []:
            value_from = e.get("valueFrom")
            if not value_from:
                continue
            await self._key_ref(f, parent, ns, SEC_GVR, value_from.get("secretKeyRef"))
            await self._key_ref(f, parent, ns, CM_GVR, value_from.get("configMapKeyRef"))

        for e in co.get("envFrom") or []:
            if (ref := e.get("configMapRef")) is not None:
                await add_ref(f, parent, CM_GVR, fqn(ns, ref.get("name", "")), ref.get("optional"))
            if (ref := e.get("secretRef")) is not None:
                await add_ref(f, parent, SEC_GVR, fqn(ns, ref.get("name", "")), ref.get("optional"))

    async def _key_ref(
        self,
        f: Factory,
        parent: TreeNode,
        ns: str,
        gvr: GVR,
        ref: dict[str, Any] | None,
    ) -> None:
        if ref is None:
            return
        await add_ref(f, parent, gvr, fqn(ns, ref.get("name", "")), ref.get("optional"))


def _container_status(status: dict[str, Any]) -> StatusKind:
    waiting = (status.get("state") or {}).get("waiting")
    if not status.get("ready", False) or waiting:
        return StatusKind.TOAST
    return StatusKind.OK
