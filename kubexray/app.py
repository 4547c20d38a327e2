"""Application wiring for kubexray.

Startup order: config → logging → factory → custom views → tree builder.
The surrounding dashboard owns the screen; this object only hands it trees
and view settings.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from kubexray.config import load_config
from kubexray.factory.base import Factory
from kubexray.models.config import KubeXrayConfig
from kubexray.models.resources import GVR
from kubexray.observability.logging import get_logger, setup_logging
from kubexray.views.custom_view import CustomView
from kubexray.xray.builder import TreeBuilder
from kubexray.xray.renderer import RendererRegistry
from kubexray.xray.tree import TreeNode

if TYPE_CHECKING:
    import structlog


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class XrayApp:
    """Owns the factory, the custom view registry and the tree builder.

    ``stop()`` is safe on an app that was never started.
    """

    def __init__(
        self,
        factory: Factory | None = None,
        registry: RendererRegistry | None = None,
    ) -> None:
        self.config: KubeXrayConfig | None = None
        self.views = CustomView()
        self._factory = factory
        self._owns_factory = False
        self._registry = registry
        self._builder: TreeBuilder | None = None
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        self.config = load_config()

        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("kubexray starting", version=_kubexray_version())

        await self._start_factory()
        self._start_views()
        self._builder = TreeBuilder(self._require_factory(), self._registry)

        self._running = True
        self._log.info("kubexray started", kinds=len(self._builder.registry.kinds()))

    async def _start_factory(self) -> None:
        """Use the injected factory, or a kubernetes-asyncio one from kubeconfig."""
        assert self._log is not None
        assert self.config is not None
        if self._factory is not None:
            return
        try:
            import kubernetes_asyncio.config as k8s_config

            from kubexray.factory.kube import KubeFactory

            try:
                k8s_config.load_incluster_config()
                self._log.info("k8s client configured from in-cluster service account")
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config()
                self._log.info("k8s client configured from kubeconfig")

            self._factory = KubeFactory(cache_ttl=self.config.factory.cache_ttl_seconds)
            self._owns_factory = True
        except Exception as exc:
            raise _ComponentError("factory", exc) from exc

    def _start_views(self) -> None:
        """Load custom views. A missing file just means defaults everywhere."""
        assert self._log is not None
        assert self.config is not None
        try:
            self.views.load(self.config.views.path)
        except Exception as exc:
            raise _ComponentError("views", exc) from exc

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def xray(self, gvr: GVR, ns: str, objects: Iterable[object]) -> TreeNode:
        """Build a fresh tree for *objects* within the configured deadline."""
        if self._builder is None or self.config is None:
            raise RuntimeError("XrayApp.xray() called before start()")
        return await self._builder.build(
            gvr,
            ns,
            objects,
            timeout=self.config.xray.build_timeout_seconds,
        )

    def reload_views(self) -> None:
        """Re-read the views file and notify listeners."""
        if self.config is None:
            raise RuntimeError("XrayApp.reload_views() called before start()")
        self.views.load(self.config.views.path)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._owns_factory:
            try:
                await self._factory.close()  # type: ignore[union-attr]
            except Exception as exc:  # noqa: BLE001
                if self._log is not None:
                    self._log.warning("factory close failed", error=str(exc))
        if self._log is not None:
            self._log.info("kubexray stopped")

    def _require_factory(self) -> Factory:
        if self._factory is None:
            raise _ComponentError("factory", RuntimeError("no factory configured"))
        return self._factory


def _kubexray_version() -> str:
    from kubexray import __version__

    return __version__
