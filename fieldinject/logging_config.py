"""Logging configuration for the command line.

Library modules only create module-level loggers; the handler is installed
here, on the ``fieldinject`` package logger, when the CLI starts.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "fieldinject"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Send package logs to stderr.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: Log DEBUG and above instead of WARNING and above

    Returns:
        The configured package logger.
    """
    global _console_handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if _console_handler is not None:
        logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(_console_handler)

    return logger
