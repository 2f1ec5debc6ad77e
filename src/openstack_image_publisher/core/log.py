"""Logging helpers."""

import logging

TRACE = 5

logging.addLevelName(TRACE, "TRACE")


def get_logger(name: str, logger: logging.Logger | None = None) -> logging.Logger:
    """Return the injected logger, or the module logger for ``name``."""
    return logger if logger is not None else logging.getLogger(name)


def trace(logger: logging.Logger, msg: str, *args) -> None:
    """Log ``msg`` at TRACE level."""
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, msg, *args)
