"""Structured logging setup shared by the library modules and the CLI."""

import logging
import os
from typing import Optional

import structlog


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure structlog for application-wide logging.

    Initializes stdlib logging at LOG_LEVEL (default INFO) and renders
    structlog events with ISO timestamps as JSON, or as human-readable
    console lines when LOG_FORMAT=console.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    renderer_name = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format="%(message)s")

    if renderer_name == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger that always emits through stdlib logging.

    Until the application calls configure_logging (or sets up stdlib
    handlers itself), stdlib drops debug and info records, so library
    callers see no output.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
