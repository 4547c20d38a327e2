"""Shared fixtures for kubexray integration tests.

Provides an in-memory live-state accessor seeded with realistic objects so
integration tests can exercise full tree builds without touching a real
cluster.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubexray.models.resources import CM_GVR, GVR, SA_GVR, SEC_GVR, LabelSelector

# ---------------------------------------------------------------------------
# Object factory helpers
# ---------------------------------------------------------------------------


def make_object(name: str, namespace: str = "default", labels: dict[str, str] | None = None) -> dict[str, Any]:
    """Create a minimal manifest with metadata only."""
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "1",
            "labels": labels or {},
        },
    }


def make_store_factory(store: dict[tuple[GVR, str], dict[str, Any]]) -> MagicMock:
    """Wrap *store* in a Factory-shaped mock whose ``get`` is awaitable."""

    async def _get(gvr: GVR, id: str, skip_cache: bool, selector: LabelSelector) -> dict[str, Any] | None:
        obj = store.get((gvr, id))
        if obj is None or not selector.matches(obj["metadata"].get("labels")):
            return None
        return obj

    factory = MagicMock()
    factory.get = AsyncMock(side_effect=_get)
    return factory


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cluster_store() -> dict[tuple[GVR, str], dict[str, Any]]:
    """Objects present in the fake cluster. ``db-pass`` is deliberately absent."""
    return {
        (CM_GVR, "default/app-cfg"): make_object("app-cfg"),
        (CM_GVR, "default/features"): make_object("features"),
        (SEC_GVR, "default/registry"): make_object("registry"),
        (SA_GVR, "default/default"): make_object("default"),
        (SA_GVR, "default/runner"): make_object("runner"),
    }


@pytest.fixture
def factory(cluster_store: dict[tuple[GVR, str], dict[str, Any]]) -> MagicMock:
    return make_store_factory(cluster_store)
