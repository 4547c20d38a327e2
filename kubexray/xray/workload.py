"""Workload renderers: controllers that own a pod template."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kubexray.models.resources import CJ_GVR, DS_GVR, GVR
from kubexray.xray.pod import object_fqn, pod_spec_refs
from kubexray.xray.renderer import RenderContext, Renderer
from kubexray.xray.tree import StatusKind, TreeNode


def _template_spec(obj: dict[str, Any]) -> dict[str, Any]:
    spec = obj.get("spec") or {}
    return (spec.get("template") or {}).get("spec") or {}


def _cronjob_template_spec(obj: dict[str, Any]) -> dict[str, Any]:
    job_spec = ((obj.get("spec") or {}).get("jobTemplate") or {}).get("spec") or {}
    return (job_spec.get("template") or {}).get("spec") or {}


def _replicas_healthy(obj: dict[str, Any]) -> bool:
    desired = (obj.get("spec") or {}).get("replicas", 1)
    ready = (obj.get("status") or {}).get("readyReplicas", 0)
    return ready >= desired


def _daemonset_healthy(obj: dict[str, Any]) -> bool:
    status = obj.get("status") or {}
    return status.get("numberReady", 0) >= status.get("desiredNumberScheduled", 0)


def _job_healthy(obj: dict[str, Any]) -> bool:
    return not (obj.get("status") or {}).get("failed", 0)


class WorkloadRenderer(Renderer):
    """Renders a workload node and the references of its pod template."""

    def __init__(
        self,
        gvr: GVR,
        healthy: Callable[[dict[str, Any]], bool] = _replicas_healthy,
        template: Callable[[dict[str, Any]], dict[str, Any]] = _template_spec,
    ) -> None:
        self.gvr = gvr
        self._healthy = healthy
        self._template = template

    async def render(self, ctx: RenderContext, ns: str, obj: object) -> None:
        self.check_type(obj)
        assert isinstance(obj, dict)
        _, parent = ctx.require()

        node = TreeNode(self.gvr, object_fqn(ns, obj))
        pns = (obj.get("metadata") or {}).get("namespace") or ns
        await pod_spec_refs(ctx, node, pns, self._template(obj))
        node.set_status(StatusKind.OK if self._healthy(obj) else StatusKind.TOAST)
        parent.add(node)


def daemonset_renderer() -> WorkloadRenderer:
    return WorkloadRenderer(DS_GVR, healthy=_daemonset_healthy)


def job_renderer(gvr: GVR) -> WorkloadRenderer:
    return WorkloadRenderer(gvr, healthy=_job_healthy)


def cronjob_renderer() -> WorkloadRenderer:
    return WorkloadRenderer(CJ_GVR, healthy=lambda _: True, template=_cronjob_template_spec)
