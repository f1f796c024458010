"""Structured logging setup for shopgen.

Modules log through ``structlog.get_logger(__name__)`` with snake_case event
names and key/value context, e.g.::

    logger.info("table_loaded", table="Orders", rows=1000)

The CLI calls configure_logging once per invocation. Logs go to stderr so
they never mix with report output on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "WARNING", *, json: bool = False) -> None:
    """Configure structlog processors and level filter.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json: Render JSON lines instead of the console format

    Raises:
        ValueError: Unknown level name
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **context: Any) -> structlog.typing.FilteringBoundLogger:
    """Get a logger with optional bound context.

    Example:
        >>> log = get_logger(__name__, step="load")
        >>> log.info("table_loaded", table="Orders")
    """
    return structlog.get_logger(name).bind(**context)
