"""kubernetes-asyncio backed live-state accessor.

Objects are returned as plain API-shaped dicts (camelCase keys), the same
shape renderers receive from the traversal driver. A warm cache keyed by
``(gvr, id)`` answers repeated lookups unless the caller asks for a fresh
read.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from kubernetes_asyncio.client.exceptions import ApiException

from kubexray.factory.errors import FactoryError, UnsupportedResourceError
from kubexray.models.resources import (
    CJ_GVR,
    CM_GVR,
    DP_GVR,
    DS_GVR,
    GVR,
    JOB_GVR,
    POD_GVR,
    PVC_GVR,
    RS_GVR,
    SA_GVR,
    SEC_GVR,
    STS_GVR,
    SVC_GVR,
    LabelSelector,
    namespaced,
)
from kubexray.observability.logging import get_logger

_logger = get_logger("factory.kube")

# GVR -> (api group key, reader method)
_READERS: dict[GVR, tuple[str, str]] = {
    POD_GVR: ("core", "read_namespaced_pod"),
    SEC_GVR: ("core", "read_namespaced_secret"),
    CM_GVR: ("core", "read_namespaced_config_map"),
    SA_GVR: ("core", "read_namespaced_service_account"),
    PVC_GVR: ("core", "read_namespaced_persistent_volume_claim"),
    SVC_GVR: ("core", "read_namespaced_service"),
    DP_GVR: ("apps", "read_namespaced_deployment"),
    STS_GVR: ("apps", "read_namespaced_stateful_set"),
    DS_GVR: ("apps", "read_namespaced_daemon_set"),
    RS_GVR: ("apps", "read_namespaced_replica_set"),
    JOB_GVR: ("batch", "read_namespaced_job"),
    CJ_GVR: ("batch", "read_namespaced_cron_job"),
}


@dataclass
class _CacheEntry:
    obj: dict[str, Any] | None
    fetched_at: float


class KubeFactory:
    """Fetches objects by GVR and fully qualified name.

    Args:
        api_client: kubernetes-asyncio ``ApiClient``. Created lazily from the
                    loaded kube configuration when omitted.
        cache_ttl:  Seconds a cached answer stays fresh.
        apis:       Pre-built API objects keyed by ``core``/``apps``/``batch``.
    """

    def __init__(
        self,
        api_client: Any = None,
        cache_ttl: float = 30.0,
        apis: Mapping[str, Any] | None = None,
    ) -> None:
        self._api_client = api_client
        self._cache_ttl = cache_ttl
        self._apis: dict[str, Any] = dict(apis or {})
        self._cache: dict[tuple[GVR, str], _CacheEntry] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def supports(gvr: GVR) -> bool:
        return gvr in _READERS

    async def get(
        self,
        gvr: GVR,
        id: str,
        skip_cache: bool,
        selector: LabelSelector,
    ) -> dict[str, Any] | None:
        key = (gvr, id)
        obj: dict[str, Any] | None
        entry = None
        if not skip_cache:
            async with self._lock:
                entry = self._cache.get(key)
            if entry is not None and time.monotonic() - entry.fetched_at > self._cache_ttl:
                entry = None

        if entry is not None:
            obj = entry.obj
        else:
            obj = await self._fetch(gvr, id)
            async with self._lock:
                now = time.monotonic()
                self._evict_expired(now)
                self._cache[key] = _CacheEntry(obj=obj, fetched_at=now)

        if obj is None:
            return None
        labels = obj.get("metadata", {}).get("labels") or {}
        if not selector.matches(labels):
            return None
        return obj

    async def invalidate(self, gvr: GVR | None = None) -> None:
        """Drop cached answers, for one GVR or all of them."""
        async with self._lock:
            if gvr is None:
                self._cache.clear()
                return
            for key in [k for k in self._cache if k[0] == gvr]:
                del self._cache[key]

    async def close(self) -> None:
        """Close the ApiClient connection pool, if this factory owns one."""
        if self._api_client is not None:
            await self._api_client.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch(self, gvr: GVR, id: str) -> dict[str, Any] | None:
        if gvr not in _READERS:
            raise UnsupportedResourceError(gvr, id)
        group, method = _READERS[gvr]
        reader = getattr(self._api(group), method)
        ns, name = namespaced(id)
        try:
            res = await reader(name, ns)
        except ApiException as exc:
            if exc.status == 404:
                _logger.debug("object_not_found", gvr=str(gvr), id=id)
                return None
            raise FactoryError(gvr, id, exc) from exc
        return self._to_dict(res)

    def _evict_expired(self, now: float) -> None:
        # Caller holds self._lock.
        for key in [k for k, e in self._cache.items() if now - e.fetched_at > self._cache_ttl]:
            del self._cache[key]

    def _api(self, group: str) -> Any:
        if group not in self._apis:
            from kubernetes_asyncio import client as k8s_client

            if self._api_client is None:
                self._api_client = k8s_client.ApiClient()
            ctor = {
                "core": k8s_client.CoreV1Api,
                "apps": k8s_client.AppsV1Api,
                "batch": k8s_client.BatchV1Api,
            }[group]
            self._apis[group] = ctor(self._api_client)
        return self._apis[group]

    def _to_dict(self, res: Any) -> dict[str, Any] | None:
        if res is None or isinstance(res, dict):
            return res
        if self._api_client is None:
            raise TypeError(f"cannot serialize {type(res).__name__} without an ApiClient")
        return self._api_client.sanitize_for_serialization(res)
