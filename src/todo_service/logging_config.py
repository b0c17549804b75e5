"""Structured logging setup."""

from __future__ import annotations

import logging

import structlog


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with level filtering, ISO timestamps and console output."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )
