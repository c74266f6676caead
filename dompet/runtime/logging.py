"""Centralized logging configuration for dompet.

Every module logs through ``get_logger(__name__)``; records end up under the
``dompet`` logger namespace, which gets a single stderr handler.

Usage:
    from dompet.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Rejected line %r (%s)", line, reason)
    logger.info("Parsed %d candidates", len(candidates))

Environment variables:
    DOMPET_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

ROOT_LOGGER_NAME = "dompet"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def level_from_env(default: int = DEFAULT_LOG_LEVEL) -> int:
    """Level named by DOMPET_LOG_LEVEL; unknown or empty values give ``default``."""
    return _LEVEL_NAMES.get(os.environ.get("DOMPET_LOG_LEVEL", "").strip().upper(), default)


def _formatter(level: int) -> logging.Formatter:
    # Line numbers only help when debugging.
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler to the ``dompet`` namespace, once per process."""
    global _logging_configured

    if _logging_configured:
        return

    level = level_from_env() if level is None else level
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(level))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module name.

    ``dompet.*`` names are used as-is; anything else is nested under the
    ``dompet`` namespace so it shares the same handler.
    """
    configure_logging()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the level (and the format that goes with it) at runtime."""
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setFormatter(_formatter(level))
