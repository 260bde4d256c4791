"""Structured logging configuration.

Log output goes to stderr so that decoded page dumps written to stdout
stay machine readable.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from pg_peek.infrastructure.config import ObservabilityConfig


def render_enums(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace enum and flag values by their lower-case names.

    Byte orders, line pointer statuses and flag sets otherwise reach the
    JSON renderer as reprs or bare integers.
    """
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            name = value.name
            event_dict[key] = name.lower() if name else str(value.value)
    return event_dict


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
    *,
    config: ObservabilityConfig | None = None,
) -> None:
    """
    Set up structured logging with structlog.

    Explicit arguments win over ``config``; without either, INFO-level
    JSON logging is configured.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
        config: Observability settings to take defaults from
    """
    level = (level or (config.log_level if config else "INFO")).upper()
    log_format = log_format or (config.log_format if config else "json")
    numeric_level = getattr(logging, level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        render_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally bound to context such as a file path or page size."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
