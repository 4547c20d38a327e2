"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class ViewsConfig:
    """Custom view registry configuration."""

    path: str = "~/.config/kubexray/views.yaml"


@dataclass
class FactoryConfig:
    """Live-state accessor configuration."""

    cache_ttl_seconds: int = 30


@dataclass
class XrayConfig:
    """Tree builder configuration."""

    build_timeout_seconds: int = 10


@dataclass
class KubeXrayConfig:
    """Top-level kubexray configuration."""

    log: LogConfig = field(default_factory=LogConfig)
    views: ViewsConfig = field(default_factory=ViewsConfig)
    factory: FactoryConfig = field(default_factory=FactoryConfig)
    xray: XrayConfig = field(default_factory=XrayConfig)
