"""End-to-end tree builds through the default registry.

Covers the container scenario (one missing required secret, one present
optional config map), a full deployment, and the XrayApp wiring with custom
views.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from kubexray import app as app_module
from kubexray.app import XrayApp
from kubexray.models.resources import CM_GVR, CO_GVR, DP_GVR, POD_GVR, SA_GVR, SEC_GVR, ContainerRes
from kubexray.views.settings import ViewSetting
from kubexray.xray.builder import TreeBuilder
from kubexray.xray.container import ContainerRenderer
from kubexray.xray.renderer import RenderContext
from kubexray.xray.tree import StatusKind, TreeNode

_APP_CONTAINER: dict[str, Any] = {
    "name": "app",
    "image": "app:v1",
    "env": [
        {"name": "DB_PASSWORD", "valueFrom": {"secretKeyRef": {"name": "db-pass", "key": "password", "optional": False}}},
    ],
    "envFrom": [{"configMapRef": {"name": "app-cfg", "optional": True}}],
}


# ---------------------------------------------------------------------------
# Container scenario
# ---------------------------------------------------------------------------


class TestContainerScenario:
    async def test_missing_secret_and_present_config_map(self, factory: MagicMock) -> None:
        pod = TreeNode(POD_GVR, "default/web-0")
        ctx = RenderContext(factory=factory, parent=pod)
        with capture_logs() as logs:
            await ContainerRenderer().render(ctx, "default", ContainerRes(container=_APP_CONTAINER))

        assert len(pod.children) == 1
        co = pod.children[0]
        assert (co.gvr, co.id) == (CO_GVR, "default/app")
        assert len(co.children) == 2
        sec = co.find(SEC_GVR, "default/db-pass")
        cm = co.find(CM_GVR, "default/app-cfg")
        assert sec is not None and sec.status == StatusKind.MISSING_REF
        assert cm is not None and cm.status == StatusKind.OK
        assert [e["id"] for e in logs if e["event"] == "missing_ref"] == ["default/db-pass"]


# ---------------------------------------------------------------------------
# Deployment scenario
# ---------------------------------------------------------------------------


def _deployment(name: str, ready: int = 2) -> dict[str, Any]:
    return {
        "metadata": {"name": name, "namespace": "default"},
        "spec": {
            "replicas": 2,
            "template": {
                "spec": {
                    "serviceAccountName": "runner",
                    "imagePullSecrets": [{"name": "registry"}],
                    "containers": [_APP_CONTAINER],
                    "volumes": [{"name": "features", "configMap": {"name": "features"}}],
                }
            },
        },
        "status": {"readyReplicas": ready},
    }


class TestDeploymentTree:
    async def test_builds_sorted_tree(self, factory: MagicMock) -> None:
        root = await TreeBuilder(factory).build(DP_GVR, "default", [_deployment("web"), _deployment("api", ready=0)])

        assert [c.id for c in root.children] == ["default/api", "default/web"]
        api, web = root.children
        assert api.status == StatusKind.TOAST
        assert web.status == StatusKind.OK

        kinds = [(str(c.gvr), c.id, c.status) for c in web.children]
        assert kinds == [
            ("v1/configmaps", "default/features", "Ok"),
            ("v1/containers", "default/app", None),
            ("v1/secrets", "default/registry", "Ok"),
            ("v1/serviceaccounts", "default/runner", "Ok"),
        ]
        assert root.count(SEC_GVR) == 4
        assert root.count(SA_GVR) == 2

    async def test_dump_is_plain_data(self, factory: MagicMock) -> None:
        root = await TreeBuilder(factory).build(DP_GVR, "default", [_deployment("web")])
        dumped = root.dump()
        assert dumped["gvr"] == "apps/v1/deployments"
        assert dumped["children"][0]["id"] == "default/web"


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


class _Listener:
    def __init__(self, ns: str) -> None:
        self.ns = ns
        self.received: list[ViewSetting | None] = []

    def view_settings_changed(self, vs: ViewSetting | None) -> None:
        self.received.append(vs)

    def get_namespace(self) -> str:
        return self.ns


@pytest.fixture
def views_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    p = tmp_path / "views.yaml"
    p.write_text("views:\n  apps/v1/deployments@kube-.*:\n    columns: [NAME, READY]\n", encoding="utf-8")
    monkeypatch.setenv("KUBEXRAY_VIEWS_PATH", str(p))
    monkeypatch.setenv("KUBEXRAY_BUILD_TIMEOUT", "5")
    monkeypatch.setattr(app_module, "setup_logging", lambda *args, **kwargs: None)
    return p


class TestXrayApp:
    async def test_start_loads_views_and_builds(self, factory: MagicMock, views_file: Path) -> None:
        app = XrayApp(factory=factory)
        await app.start()
        try:
            assert app.running
            listener = _Listener("kube-system")
            app.views.add_listener("apps/v1/deployments", listener)
            assert listener.received == [ViewSetting(columns=["NAME", "READY"])]

            root = await app.xray(DP_GVR, "default", [_deployment("web")])
            assert root.children[0].id == "default/web"

            views_file.write_text("views: {}\n", encoding="utf-8")
            app.reload_views()
            assert listener.received[-1] is None
        finally:
            await app.stop()
        assert not app.running

    async def test_xray_before_start_raises(self, factory: MagicMock) -> None:
        with pytest.raises(RuntimeError):
            await XrayApp(factory=factory).xray(DP_GVR, "default", [])

    async def test_stop_without_start_is_safe(self) -> None:
        await XrayApp().stop()
