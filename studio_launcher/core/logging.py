"""Logging configuration using structlog."""

import logging
import sys

import structlog

from studio_launcher.core.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog for the launcher."""
    settings = settings or get_settings()

    log_level = settings.app.log_level.value

    # The child dev server owns stdout; launcher lines go to stderr.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
            if settings.observability.record_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
