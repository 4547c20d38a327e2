"""Pod renderer and the pod-spec walk shared with workload renderers."""

from __future__ import annotations

from typing import Any

from kubexray.factory.base import Factory
from kubexray.models.resources import (
    CM_GVR,
    POD_GVR,
    PVC_GVR,
    SA_GVR,
    SEC_GVR,
    ContainerRes,
    fqn,
)
from kubexray.xray.container import ContainerRenderer
from kubexray.xray.refs import add_ref
from kubexray.xray.renderer import RenderContext, Renderer
from kubexray.xray.tree import StatusKind, TreeNode

_UNHEALTHY_PHASES = {"Failed", "Unknown"}

_containers = ContainerRenderer()


def object_fqn(ns: str, obj: dict[str, Any]) -> str:
    """FQN of a manifest, preferring its own namespace over *ns*."""
    meta = obj.get("metadata") or {}
    return fqn(meta.get("namespace") or ns, meta.get("name", ""))


async def pod_spec_refs(
    ctx: RenderContext,
    node: TreeNode,
    ns: str,
    spec: dict[str, Any],
    statuses: dict[str, dict[str, Any]] | None = None,
) -> None:
    """Attach containers, volumes, service account and pull secrets of *spec* under *node*."""
    f, _ = ctx.require()
    statuses = statuses or {}
    sub = ctx.with_parent(node)

    for co in spec.get("initContainers") or []:
        res = ContainerRes(container=co, status=statuses.get(co.get("name", "")), is_init=True)
        await _containers.render(sub, ns, res)
    for co in spec.get("containers") or []:
        res = ContainerRes(container=co, status=statuses.get(co.get("name", "")))
        await _containers.render(sub, ns, res)

    await _volume_refs(f, node, ns, spec.get("volumes") or [])

    sa = spec.get("serviceAccountName") or "default"
    await add_ref(f, node, SA_GVR, fqn(ns, sa), False)

    for ref in spec.get("imagePullSecrets") or []:
        await add_ref(f, node, SEC_GVR, fqn(ns, ref.get("name", "")), False)


async def _volume_refs(f: Factory, parent: TreeNode, ns: str, volumes: list[dict[str, Any]]) -> None:
    for v in volumes:
        if (sec := v.get("secret")) is not None:
            await add_ref(f, parent, SEC_GVR, fqn(ns, sec.get("secretName", "")), sec.get("optional"))
        if (cm := v.get("configMap")) is not None:
            await add_ref(f, parent, CM_GVR, fqn(ns, cm.get("name", "")), cm.get("optional"))
        if (pvc := v.get("persistentVolumeClaim")) is not None:
            await add_ref(f, parent, PVC_GVR, fqn(ns, pvc.get("claimName", "")), False)
        for src in (v.get("projected") or {}).get("sources") or []:
            if (sec := src.get("secret")) is not None:
                await add_ref(f, parent, SEC_GVR, fqn(ns, sec.get("name", "")), sec.get("optional"))
            if (cm := src.get("configMap")) is not None:
                await add_ref(f, parent, CM_GVR, fqn(ns, cm.get("name", "")), cm.get("optional"))


class PodRenderer(Renderer):
    """Renders a pod manifest with its containers and referenced objects."""

    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        self.check_type(obj)
        assert isinstance(obj, dict)
        _, parent = ctx.require()

        node = TreeNode(POD_GVR, object_fqn(ns, obj))
        pns = (obj.get("metadata") or {}).get("namespace") or ns
        status = obj.get("status") or {}
        statuses = {
            cs.get("name", ""): cs
            for cs in (status.get("initContainerStatuses") or []) + (status.get("containerStatuses") or [])
        }
        await pod_spec_refs(ctx, node, pns, obj.get("spec") or {}, statuses)

        if status.get("phase") in _UNHEALTHY_PHASES:
            node.set_status(StatusKind.TOAST)
        else:
            node.set_status(StatusKind.OK)
        parent.add(node)
