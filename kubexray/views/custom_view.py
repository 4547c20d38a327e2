"""Custom view registry.

Holds per-kind, per-namespace column and sort overrides loaded from a YAML
file and pushes the applicable setting to interested views whenever the
file is reloaded.

View keys are either a bare kind (``v1/pods``) or ``kind@pattern`` where
pattern is a regular expression searched in ``kind@namespace``. An exact
key always wins over a pattern; patterns are tried in lexicographic key
order so the outcome never depends on mapping order.
"""

from __future__ import annotations

import functools
import re
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Protocol

import jsonschema
import yaml

from kubexray.observability.logging import get_logger
from kubexray.views.errors import ViewsLoadError
from kubexray.views.schema import VIEWS_SCHEMA
from kubexray.views.settings import ViewSetting

_logger = get_logger("views")

_SEP = "@"


class ViewConfigListener(Protocol):
    """A view that wants to hear about its custom settings."""

    def view_settings_changed(self, vs: ViewSetting | None) -> None:
        """Called with the applicable setting, or None for defaults."""

    def get_namespace(self) -> str:
        """Namespace the view currently shows; empty for all namespaces."""


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def _view_key(kind: str, ns: str) -> str:
    return kind if not ns else f"{kind}{_SEP}{ns}"


def _pattern_keys(views: Mapping[str, ViewSetting], kind: str) -> list[tuple[str, re.Pattern[str]]]:
    out = []
    for key in sorted(views):
        if not key.startswith(kind + _SEP):
            continue
        tt = key.split(_SEP)
        if len(tt) != 2:
            continue
        rx = _compile(tt[1])
        if rx is not None:
            out.append((key, rx))
    return out


def _parse_views(doc: Any, path: str) -> dict[str, ViewSetting]:
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ViewsLoadError(path, TypeError(f"expected a mapping, got {type(doc).__name__}"))
    raw_views = doc.get("views") or {}
    if not isinstance(raw_views, dict):
        raise ViewsLoadError(path, TypeError("views must be a mapping"))

    views: dict[str, ViewSetting] = {}
    for key, raw in raw_views.items():
        if raw is not None and not isinstance(raw, dict):
            raise ViewsLoadError(path, TypeError(f"view {key!r} must be a mapping"))
        if raw and not isinstance(raw.get("columns") or [], list):
            raise ViewsLoadError(path, TypeError(f"view {key!r} columns must be a list"))
        views[str(key)] = ViewSetting.from_dict(raw)
    return views


class CustomView:
    """Registry of custom view settings and their listeners."""

    def __init__(self) -> None:
        self._views: dict[str, ViewSetting] = {}
        self._listeners: dict[str, ViewConfigListener] = {}
        self._lock = threading.Lock()

    @property
    def views(self) -> Mapping[str, ViewSetting]:
        """Read-only snapshot of the current mapping."""
        return MappingProxyType(self._views)

    def reset(self) -> None:
        """Clear out all settings. Listeners are kept."""
        self._views = {}

    def load(self, path: str | Path) -> None:
        """Replace all settings with the contents of *path*.

        A missing file is not an error and leaves the registry untouched.
        Schema violations are logged and the content is applied anyway.

        Raises:
            ViewsLoadError: the file cannot be read or parsed.
        """
        p = Path(path)
        if not p.exists():
            _logger.debug("views_file_missing", path=str(p))
            return
        try:
            doc = yaml.safe_load(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ViewsLoadError(str(p), exc) from exc

        try:
            jsonschema.validate(doc, VIEWS_SCHEMA)
        except jsonschema.ValidationError as exc:
            _logger.warning(
                "views_validation_failed",
                path=str(p),
                error=exc.message,
            )

        views = _parse_views(doc, str(p))
        self._views = views
        _logger.info("views_loaded", path=str(p), count=len(views))
        self._warn_ambiguous(views, str(p))
        self.fire_config_changed()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, kind: str, listener: ViewConfigListener) -> None:
        """Register *listener* for *kind*, replacing any previous one, and notify it."""
        with self._lock:
            self._listeners[kind] = listener
        self._notify(kind, listener)

    def remove_listener(self, kind: str) -> None:
        with self._lock:
            self._listeners.pop(kind, None)

    def fire_config_changed(self) -> None:
        """Push the applicable setting (or None) to every listener."""
        with self._lock:
            listeners = list(self._listeners.items())
        for kind, listener in listeners:
            self._notify(kind, listener)

    def _notify(self, kind: str, listener: ViewConfigListener) -> None:
        vs = self.get_vs(kind, listener.get_namespace())
        if vs is not None:
            _logger.debug("custom_view_reloaded", kind=kind)
        listener.view_settings_changed(vs)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def get_vs(self, kind: str, ns: str) -> ViewSetting | None:
        """Return the setting for *kind* viewed in *ns*, or None.

        An exact key match wins; otherwise the first pattern key, in
        lexicographic order, whose pattern is found in ``kind@ns``.
        """
        views = self._views
        k = _view_key(kind, ns)
        if k in views:
            return views[k].copy()
        for key, rx in _pattern_keys(views, kind):
            if rx.search(k):
                return views[key].copy()
        return None

    def matching_keys(self, kind: str, ns: str) -> list[str]:
        """All pattern keys (exact key excluded) matching *kind* in *ns*."""
        views = self._views
        k = _view_key(kind, ns)
        return [key for key, rx in _pattern_keys(views, kind) if key != k and rx.search(k)]

    def _warn_ambiguous(self, views: Mapping[str, ViewSetting], path: str) -> None:
        with self._lock:
            probes = [(kind, listener.get_namespace()) for kind, listener in self._listeners.items()]
        for kind, ns in probes:
            if _view_key(kind, ns) in views:
                continue
            keys = self.matching_keys(kind, ns)
            if len(keys) > 1:
                _logger.warning(
                    "views_ambiguous_keys",
                    path=path,
                    kind=kind,
                    namespace=ns,
                    keys=keys,
                    selected=keys[0],
                )
