"""
Structured logging configuration using structlog.

Production emits one JSON object per line for log aggregators; every other
environment gets coloured console output. Request-scoped fields such as
``request_id`` are bound through contextvars by the API middleware and
merged into every record logged while the request is in flight.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from disaster_feed.config.settings import get_settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    In production: JSON lines, with exception info rendered into the record
    In development: coloured console output

    Standard library loggers (used by the library layer, e.g. the fetchers
    and the broadcaster) are routed to stdout at ``LOG_LEVEL``.

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Official updates fetched", disaster_id="42", count=5)
    """
    settings = get_settings()

    # Applied in every environment, before rendering
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

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
        level=getattr(logging, settings.log_level),
    )

    # Provider HTTP clients log every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """
    Bind context variables to all subsequent log messages.

    The request middleware binds ``request_id`` here so that every line
    logged while serving a request can be correlated.

    Args:
        **kwargs: Key-value pairs to bind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables (end of request)."""
    structlog.contextvars.clear_contextvars()
