"""Logging setup for odefinder_pkg.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers onto the package logger so that the CLI (or a host application)
decides where records go.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "odefinder_pkg"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path; records are also appended to this file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Re-running setup (e.g. repeated CLI calls in one process) must not
    # stack duplicate handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``get_logger("cli")``."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
