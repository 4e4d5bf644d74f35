"""
Structured logging setup (structlog).

Usage:
    from supplier_pricing.core.logging import get_logger, setup_logging

    setup_logging("INFO")      # call once at startup
    logger = get_logger(__name__)
    logger.info("Job claimed", job_id=str(job.id))

Development renders coloured key/value lines; every other environment
emits one JSON object per event so log shippers can index the fields.
"""

from __future__ import annotations

import logging
import sys

import structlog

from supplier_pricing.core.config import settings

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog.  Safe to call more than once."""
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.APP_ENV == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger, configuring defaults on first use."""
    if not _configured:
        setup_logging(settings.LOG_LEVEL)
    return structlog.get_logger(name)
