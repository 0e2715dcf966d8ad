"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from fluentsearch.config.settings import ObservabilitySettings

logger = logging.getLogger(__name__)

# Level names understood by the engine client's ``logging`` option
_ENGINE_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging for fluentsearch and the engine client.

    Args:
        settings: Observability settings. Uses defaults if None.
    """
    log_level = settings.log_level.upper() if settings else "INFO"
    log_format = settings.log_format if settings else "json"

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level, logging.INFO),
    )


def set_engine_log_level(level: str | Sequence[str] | None) -> None:
    """Apply the engine ``logging`` setting to the ``opensearch`` client loggers.

    ``level`` is a level name or a list of them; the most verbose one wins.
    ``"trace"`` additionally turns on the client's request tracer
    (``opensearchpy.trace``), which stays at WARNING otherwise.  Unknown
    names are logged and ignored; ``None`` leaves the client's logging
    untouched.
    """
    if level is None:
        return
    names = [level] if isinstance(level, str) else list(level)

    levels: list[int] = []
    for name in names:
        numeric = _ENGINE_LEVELS.get(str(name).lower())
        if numeric is None:
            logger.warning("Ignoring unknown engine client log level %r", name)
        else:
            levels.append(numeric)
    if not levels:
        return

    logging.getLogger("opensearch").setLevel(min(levels))
    tracing = any(str(name).lower() == "trace" for name in names)
    logging.getLogger("opensearchpy.trace").setLevel(logging.DEBUG if tracing else logging.WARNING)
