"""Logging setup shared by the store, repository and settings layers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Iterable

from .paths import ensure_app_structure, log_path

_LOGGER_INITIALIZED = False

LOGGER_NAME = "shift_hours"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
DEFAULT_LOG_LEVEL = logging.INFO


def _build_handlers(console: bool) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = RotatingFileHandler(
        log_path(), maxBytes=2_000_000, backupCount=3, encoding="utf-8", delay=True
    )
    file_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [file_handler]
    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)
    return handlers


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    extra_handlers: Iterable[logging.Handler] | None = None,
    *,
    console: bool = False,
) -> logging.Logger:
    """Attach the rotating log file to the ``shift_hours`` logger and return it.

    Calling it again only adjusts the level.
    """
    global _LOGGER_INITIALIZED
    logger = logging.getLogger(LOGGER_NAME)
    if _LOGGER_INITIALIZED:
        if level:
            logger.setLevel(level)
        return logger

    ensure_app_structure()
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handlers = _build_handlers(console)
    if extra_handlers:
        handlers.extend(extra_handlers)
    for handler in handlers:
        logger.addHandler(handler)

    _LOGGER_INITIALIZED = True
    logger.info("Logging initialized", extra={"event": "logging_configured", "level": level})
    return logger


def reset_logging(level: int | str = DEFAULT_LOG_LEVEL, *, reconfigure: bool = True) -> logging.Logger:
    """Close existing handlers and optionally rebuild logging configuration."""
    global _LOGGER_INITIALIZED
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        try:
            handler.close()
        finally:
            logger.removeHandler(handler)
    logger.propagate = True
    _LOGGER_INITIALIZED = False
    if reconfigure:
        return configure_logging(level)
    return logger
