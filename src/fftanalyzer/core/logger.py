"""
Logging Configuration
=====================

Centralized logging for the fftanalyzer package.

Usage:
    from fftanalyzer.core.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Ingestion started")
"""

import logging
import sys
from typing import Union

PACKAGE_NAME = "fftanalyzer"
LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the specified module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured Logger instance
    """
    _ensure_configured()
    return logging.getLogger(name)


def _ensure_configured() -> None:
    """Configure the package logger if not already done."""
    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_NAME)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    _configured = True


def set_level(level: Union[int, str]) -> None:
    """
    Set the logging level for the fftanalyzer package.

    Args:
        level: Logging level, either numeric (logging.DEBUG) or a name ("DEBUG")

    Raises:
        ValueError: If a level name is not recognized
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        level = resolved

    _ensure_configured()
    logging.getLogger(PACKAGE_NAME).setLevel(level)
