"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubexray.models.config import (
    FactoryConfig,
    KubeXrayConfig,
    LogConfig,
    ViewsConfig,
    XrayConfig,
)
from kubexray.observability.logging import LOG_FORMATS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEXRAY_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def load_config() -> KubeXrayConfig:
    """Load configuration from KUBEXRAY_* environment variables."""
    return KubeXrayConfig(
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
        views=ViewsConfig(
            path=os.path.expanduser(_env("VIEWS_PATH", ViewsConfig.path)),
        ),
        factory=FactoryConfig(
            cache_ttl_seconds=_env_int("CACHE_TTL", 30, min_val=1, max_val=600),
        ),
        xray=XrayConfig(
            build_timeout_seconds=_env_int("BUILD_TIMEOUT", 10, min_val=1, max_val=300),
        ),
    )
