"""Centralized logging configuration."""

import logging
from typing import Iterable

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that otherwise install their own handlers
THIRD_PARTY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "fastapi",
)


def _make_handler(formatter: logging.Formatter, level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(debug: bool = False, third_party: Iterable[str] = THIRD_PARTY_LOGGERS) -> None:
    """Configure a consistent logging format for the entire application.

    Args:
        debug: Log at DEBUG level instead of INFO
        third_party: Names of library loggers to route through the same format
    """
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_make_handler(formatter, level))

    for logger_name in third_party:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # Don't propagate to avoid duplicate messages
        logger.propagate = False
        logger.addHandler(_make_handler(formatter, level))
