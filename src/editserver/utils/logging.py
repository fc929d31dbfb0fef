"""Logging setup utilities for editserver.

Configures the ``editserver`` logger from the logging configuration
settings. Safe to call again, e.g. after command-line flags change the
level: handlers from an earlier call are replaced, not duplicated.
"""

from __future__ import annotations

import logging
import sys

from editserver.config.settings import LoggingConfig

PACKAGE_LOGGER = "editserver"

# Marks handlers installed here, so a later call can find and replace them
_OWNED_ATTR = "_editserver_owned"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure logging for the edit server.

    Sets the package logger's level and attaches a stderr handler plus an
    optional file handler. Handlers added by other code are left alone.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).

    Returns:
        The configured package logger.
    """
    if config is None:
        config = LoggingConfig()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in [h for h in package_logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        package_logger.addHandler(handler)

    package_logger.info("Logging initialized at %s level", config.level)
    return package_logger
