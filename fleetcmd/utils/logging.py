"""structlog configuration for diagnostic events.

Events go to stderr so that operator-facing output on stdout (see
``fleetcmd.services.reporter``) is never interleaved with diagnostics.
"""

from __future__ import annotations

import logging
import sys

import structlog

from fleetcmd.config import Settings, settings


def setup_logging(cfg: Settings | None = None) -> None:
    """Configure structlog once per process."""
    _cfg = cfg or settings
    level = logging.getLevelName(_cfg.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer: structlog.typing.Processor
    if _cfg.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
