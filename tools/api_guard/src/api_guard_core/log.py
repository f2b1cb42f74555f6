"""Logging helpers for api_guard commands."""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "api_guard"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the api_guard hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the api_guard logger."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # main() may run several times in one process (tests); avoid stacking handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[api_guard] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
