"""Logging setup shared by the image-cpr library modules and CLI.

Every module logs through a child of the ``image-cpr`` logger. Children
carry their own stdout handler but no level of their own, so switching the
parent to DEBUG (``set_debug``) turns on stage logging everywhere.
"""

import os
import sys
import logging
from typing import Optional

DEFAULT_LOGGER_NAME = "image-cpr"
HANDLER_NAME = "image-cpr.stdout"

LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
        "%Y-%m-%d %H:%M:%S",
    ),
    "simple": ("%(asctime)s - %(name)s - %(levelname)s - %(message)s", None),
}


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name, or LOG_LEVEL when none is given, to a logging level."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def build_formatter(format_type: str) -> logging.Formatter:
    """Formatter for ``format_type``; unknown types fall back to "simple"."""
    fmt, datefmt = LOG_FORMATS.get(format_type.lower(), LOG_FORMATS["simple"])
    return logging.Formatter(fmt, datefmt=datefmt)


def stdout_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    """Return the handler ``setup_logger`` attached to ``logger``, if any."""
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def _is_child(name: str) -> bool:
    return name.startswith(DEFAULT_LOGGER_NAME + ".")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup a stdout logger configured from arguments or the environment.

    Children of ``image-cpr`` follow their parent's level unless ``level``
    is given. Calling this again for the same name never adds a second
    handler, whatever other handlers are attached.

    Args:
        name: Logger name (defaults to "image-cpr")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level or not _is_child(name):
        logger.setLevel(resolve_level(level))

    if stdout_handler(logger) is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(build_formatter(os.getenv("LOG_FORMAT", format_type)))
        logger.addHandler(handler)

    # Each logger writes through its own handler only.
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return setup_logger(name)


def set_debug(logger: Optional[logging.Logger] = None) -> None:
    """Switch the ``image-cpr`` logger tree, and ``logger`` if given, to DEBUG."""
    logging.getLogger(DEFAULT_LOGGER_NAME).setLevel(logging.DEBUG)
    if logger is not None:
        logger.setLevel(logging.DEBUG)


# Create default logger instance
logger = setup_logger()
