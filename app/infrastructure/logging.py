"""Structured logging setup."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure structlog for the whole service.

    Logs go to stdout. Debug mode renders human-readable console lines,
    otherwise one JSON object per event.

    Args:
        level: Minimum log level name.
        debug: Whether to use the console renderer.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        stream=sys.stdout,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
