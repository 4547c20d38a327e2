"""Errors raised by live-state accessors."""

from __future__ import annotations

from kubexray.models.resources import GVR


class FactoryError(Exception):
    """A live-state query failed for a reason other than absence."""

    def __init__(self, gvr: GVR, id: str, cause: Exception) -> None:
        super().__init__(f"get {gvr} {id!r} failed: {cause}")
        self.gvr = gvr
        self.id = id
        self.cause = cause


class UnsupportedResourceError(FactoryError):
    """The accessor has no API method for the requested GVR."""

    def __init__(self, gvr: GVR, id: str) -> None:
        super().__init__(gvr, id, LookupError(f"no reader for {gvr}"))
