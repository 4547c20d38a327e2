"""Structured logging configuration using structlog.

Diagnostics go to stderr; stdout belongs to the dashboard screen. Tree
builds bind their kind and namespace into contextvars so every record
emitted while resolving references carries them.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

LOG_FORMATS = ("json", "console")


def setup_logging(level: str = "info", fmt: str = "json") -> None:
    """Configure structlog, rendering JSON lines or human readable console output."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer: structlog.typing.Processor
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


@contextmanager
def build_context(gvr: str, ns: str) -> Iterator[None]:
    """Tag every record logged inside the block with the build's kind and namespace."""
    with structlog.contextvars.bound_contextvars(build_gvr=gvr, build_ns=ns):
        yield
