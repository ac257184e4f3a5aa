"""Structured logging — structlog rendering for searchport's stdlib loggers.

Library modules log through ``logging.getLogger(__name__)``. ``setup_logging``
installs one root handler whose ``ProcessorFormatter`` renders those records,
and any structlog logger, as JSON lines or console output. Logs go to stderr;
stdout carries command results.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from searchport.config.settings import ObservabilitySettings

LOG_FORMATS = ("json", "console")

# httpx announces every request at INFO; the HTTP call layer already logs them at debug
_QUIET_LOGGERS = ("httpx", "httpcore")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    raise ValueError(f"Unknown log format {log_format!r}, expected one of: {', '.join(LOG_FORMATS)}")


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging for searchport.

    Args:
        settings: Observability settings. Uses defaults if None.

    Raises:
        ValueError: If the log level or format is not recognized.
    """
    log_level = settings.log_level if settings else "info"
    log_format = settings.log_format if settings else "json"

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {log_level!r}")
    renderer = _renderer(log_format)

    # Shared by structlog loggers and by records from plain stdlib loggers
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
