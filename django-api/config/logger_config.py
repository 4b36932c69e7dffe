"""Centralized logging configuration.

Application code logs through loguru. Records emitted by Django and other
libraries on the standard logging module are forwarded to loguru by
InterceptHandler, which settings.LOGGING installs on the root logger.
"""

import logging
import sys

from loguru import logger

LOG_FORMAT = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}:{function}:{line}</>",
        "{message}",
        "<y>{extra}</>",
    )
)


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so loguru reports the right origin.
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO") -> None:
    logger.remove()  # Remove default handler to avoid duplicate output and use custom format
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, backtrace=False)
