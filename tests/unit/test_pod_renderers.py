"""Tests for the Pod, workload, ServiceAccount and leaf renderers."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubexray.models.resources import (
    CJ_GVR,
    CM_GVR,
    CO_GVR,
    DP_GVR,
    DS_GVR,
    GVR,
    POD_GVR,
    PVC_GVR,
    SA_GVR,
    SEC_GVR,
    LabelSelector,
)
from kubexray.xray.errors import TypeMismatchError
from kubexray.xray.pod import PodRenderer
from kubexray.xray.renderer import RenderContext
from kubexray.xray.service_account import LeafRenderer, ServiceAccountRenderer
from kubexray.xray.tree import StatusKind, TreeNode
from kubexray.xray.workload import WorkloadRenderer, cronjob_renderer, daemonset_renderer

# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------


def _make_factory(present: set[tuple[GVR, str]] | None = None) -> MagicMock:
    names = present or set()

    async def _get(gvr: GVR, id: str, skip_cache: bool, selector: LabelSelector) -> dict[str, Any] | None:
        return {"metadata": {}} if (gvr, id) in names else None

    factory = MagicMock()
    factory.get = AsyncMock(side_effect=_get)
    return factory


def _pod_spec() -> dict[str, Any]:
    return {
        "serviceAccountName": "runner",
        "imagePullSecrets": [{"name": "registry"}],
        "initContainers": [{"name": "migrate", "envFrom": [{"secretRef": {"name": "db"}}]}],
        "containers": [
            {
                "name": "app",
                "env": [{"name": "MODE", "valueFrom": {"configMapKeyRef": {"name": "settings", "key": "mode"}}}],
            }
        ],
        "volumes": [
            {"name": "certs", "secret": {"secretName": "tls", "optional": True}},
            {"name": "conf", "configMap": {"name": "settings"}},
            {"name": "data", "persistentVolumeClaim": {"claimName": "data"}},
            {
                "name": "bundle",
                "projected": {"sources": [{"secret": {"name": "bundle-sec"}}, {"configMap": {"name": "bundle-cm"}}]},
            },
        ],
    }


def _pod(phase: str = "Running") -> dict[str, Any]:
    return {
        "metadata": {"name": "web-0", "namespace": "prod"},
        "spec": _pod_spec(),
        "status": {
            "phase": phase,
            "containerStatuses": [{"name": "app", "ready": True, "state": {"running": {}}}],
        },
    }


async def _render(renderer: Any, obj: object, factory: MagicMock | None = None, ns: str = "prod") -> TreeNode:
    root = TreeNode(POD_GVR, ns)
    await renderer.render(RenderContext(factory=factory or _make_factory(), parent=root), ns, obj)
    assert len(root.children) == 1
    return root.children[0]


# =====================================================================
# Pod
# =====================================================================


class TestPodRenderer:
    async def test_pod_children(self) -> None:
        node = await _render(PodRenderer(), _pod())
        assert node.id == "prod/web-0"
        ids = {(c.gvr, c.id) for c in node.children}
        assert ids == {
            (CO_GVR, "prod/migrate"),
            (CO_GVR, "prod/app"),
            (SEC_GVR, "prod/tls"),
            (CM_GVR, "prod/settings"),
            (PVC_GVR, "prod/data"),
            (SEC_GVR, "prod/bundle-sec"),
            (CM_GVR, "prod/bundle-cm"),
            (SA_GVR, "prod/runner"),
            (SEC_GVR, "prod/registry"),
        }

    async def test_container_refs_nest_under_containers(self) -> None:
        node = await _render(PodRenderer(), _pod())
        migrate = node.find(CO_GVR, "prod/migrate")
        assert migrate is not None
        assert [(c.gvr, c.id) for c in migrate.children] == [(SEC_GVR, "prod/db")]
        app = node.find(CO_GVR, "prod/app")
        assert app is not None and app.status == StatusKind.OK

    async def test_optional_volume_secret_unmarked(self) -> None:
        node = await _render(PodRenderer(), _pod())
        tls = node.find(SEC_GVR, "prod/tls")
        assert tls is not None and tls.status is None
        pvc = node.find(PVC_GVR, "prod/data")
        assert pvc is not None and pvc.status == StatusKind.MISSING_REF

    async def test_default_service_account(self) -> None:
        pod = {"metadata": {"name": "p"}, "spec": {"containers": []}}
        node = await _render(PodRenderer(), pod, factory=_make_factory({(SA_GVR, "prod/default")}))
        sa = node.find(SA_GVR, "prod/default")
        assert sa is not None and sa.status == StatusKind.OK

    @pytest.mark.parametrize(("phase", "status"), [("Running", StatusKind.OK), ("Failed", StatusKind.TOAST)])
    async def test_pod_status_from_phase(self, phase: str, status: StatusKind) -> None:
        node = await _render(PodRenderer(), _pod(phase))
        assert node.status == status

    async def test_wrong_type_raises(self) -> None:
        with pytest.raises(TypeMismatchError):
            await PodRenderer().render(
                RenderContext(factory=_make_factory(), parent=TreeNode(POD_GVR, "prod")),
                "prod",
                ["not", "a", "pod"],
            )


# =====================================================================
# Workloads
# =====================================================================


class TestWorkloadRenderer:
    async def test_deployment_template_refs(self) -> None:
        dp = {
            "metadata": {"name": "web", "namespace": "prod"},
            "spec": {"replicas": 2, "template": {"spec": _pod_spec()}},
            "status": {"readyReplicas": 2},
        }
        node = await _render(WorkloadRenderer(DP_GVR), dp)
        assert node.gvr == DP_GVR
        assert node.id == "prod/web"
        assert node.status == StatusKind.OK
        assert node.find(CO_GVR, "prod/app") is not None
        assert node.find(SA_GVR, "prod/runner") is not None

    async def test_deployment_short_on_replicas_is_toast(self) -> None:
        dp = {"metadata": {"name": "web"}, "spec": {"replicas": 3}, "status": {"readyReplicas": 1}}
        node = await _render(WorkloadRenderer(DP_GVR), dp)
        assert node.status == StatusKind.TOAST

    async def test_daemonset_health(self) -> None:
        ds = {"metadata": {"name": "agent"}, "status": {"numberReady": 2, "desiredNumberScheduled": 3}}
        node = await _render(daemonset_renderer(), ds)
        assert node.gvr == DS_GVR
        assert node.status == StatusKind.TOAST

    async def test_cronjob_uses_job_template(self) -> None:
        cj = {
            "metadata": {"name": "backup"},
            "spec": {"jobTemplate": {"spec": {"template": {"spec": {"containers": [{"name": "dump"}]}}}}},
        }
        node = await _render(cronjob_renderer(), cj)
        assert node.gvr == CJ_GVR
        assert node.find(CO_GVR, "prod/dump") is not None


class TestServiceAccountAndLeaf:
    async def test_service_account_secrets(self) -> None:
        sa = {
            "metadata": {"name": "runner"},
            "secrets": [{"name": "runner-token"}],
            "imagePullSecrets": [{"name": "registry"}, {"name": "runner-token"}],
        }
        node = await _render(ServiceAccountRenderer(), sa, factory=_make_factory({(SEC_GVR, "prod/registry")}))
        assert [(c.id, c.status) for c in node.children] == [
            ("prod/runner-token", StatusKind.MISSING_REF),
            ("prod/registry", StatusKind.OK),
        ]

    async def test_leaf_is_ok(self) -> None:
        node = await _render(LeafRenderer(CM_GVR), {"metadata": {"name": "settings"}})
        assert node.gvr == CM_GVR
        assert node.is_leaf()
        assert node.status == StatusKind.OK
