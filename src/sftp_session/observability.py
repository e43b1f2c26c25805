"""Logging configuration for the SFTP session package."""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", dev_mode: bool = False) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Name of the minimum level to emit (e.g. "DEBUG").
        dev_mode: Render human-readable console output instead of JSON.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer: structlog.typing.Processor = (
        structlog.dev.ConsoleRenderer()
        if dev_mode
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
