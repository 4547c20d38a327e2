"""Live-state accessor contract shared by renderers and the tree builder."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from kubexray.models.resources import GVR, LabelSelector


@runtime_checkable
class Factory(Protocol):
    """Read access to cluster objects.

    Implementations must tolerate concurrent calls. ``None`` means the
    object does not exist (or does not match *selector*); any other failure
    raises.
    """

    async def get(
        self,
        gvr: GVR,
        id: str,
        skip_cache: bool,
        selector: LabelSelector,
    ) -> dict[str, Any] | None: ...
