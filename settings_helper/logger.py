"""Shared logger instance for the settings helper."""

import logging

from .config import LOG_LEVEL, LOGGER_NAME

_LOGGER_INSTANCE = None


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    global _LOGGER_INSTANCE
    if _LOGGER_INSTANCE is None:
        instance = logging.getLogger(LOGGER_NAME)
        instance.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        if not instance.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            instance.addHandler(handler)
        _LOGGER_INSTANCE = instance
    return _LOGGER_INSTANCE


# Convenience alias so other modules can `from .logger import logger`
logger = get_logger()
