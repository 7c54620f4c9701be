"""Logging setup and timing helpers."""

import logging
import sys
import time
from contextlib import contextmanager

import structlog

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name
        fmt: "json" for JSON lines, anything else for console output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def profile(label: str):
    """Log the wall time of the wrapped block at debug level."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("profile", func=label, time=f"{elapsed_ms:.3f}ms")
