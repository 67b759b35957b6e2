"""Logging setup for the ``saltedenc`` logger hierarchy.

The package only ever logs through ``logging.getLogger(__name__)``. On import
the ``saltedenc`` logger gets a NullHandler so nothing is printed unless the
embedding application configures logging, either itself or through
:func:`configure_logging`.
"""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "saltedenc"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def install_null_handler() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Send ``saltedenc`` records at ``level`` and above to ``stream`` (stdout
    by default). The root logger is left alone. Calling this again replaces
    the handler installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_saltedenc_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    handler._saltedenc_handler = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
