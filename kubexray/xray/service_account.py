"""ServiceAccount and leaf renderers."""

from __future__ import annotations

from kubexray.models.resources import GVR, SA_GVR, SEC_GVR, fqn
from kubexray.xray.pod import object_fqn
from kubexray.xray.refs import add_ref
from kubexray.xray.renderer import RenderContext, Renderer
from kubexray.xray.tree import StatusKind, TreeNode


class ServiceAccountRenderer(Renderer):
    """Renders a service account with its token and pull secrets."""

    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        self.check_type(obj)
        assert isinstance(obj, dict)
        f, parent = ctx.require()

        node = TreeNode(SA_GVR, object_fqn(ns, obj))
        pns = (obj.get("metadata") or {}).get("namespace") or ns
        for ref in (obj.get("secrets") or []) + (obj.get("imagePullSecrets") or []):
            await add_ref(f, node, SEC_GVR, fqn(pns, ref.get("name", "")), False)
        node.set_status(StatusKind.OK)
        parent.add(node)


class LeafRenderer(Renderer):
    """Renders an object that references nothing further."""

    def __init__(self, gvr: GVR) -> None:
        self.gvr = gvr

    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        self.check_type(obj)
        assert isinstance(obj, dict)
        _, parent = ctx.require()

        node = TreeNode(self.gvr, object_fqn(ns, obj))
        node.set_status(StatusKind.OK)
        parent.add(node)
