"""
Logging configuration.

Components accept a ``logger_func`` callable; when none is given they log
through the ``heightpatch`` logger configured here. Messages tagged with the
``[DEBUG]`` prefix (emitted when ``config.DEBUG_WORKER_LOGGING`` is on) go
out at DEBUG level, everything else at INFO.
"""
import logging
import sys
from typing import Callable, Optional

from heightpatch.core import config

LOGGER_NAME = "heightpatch"
DEBUG_PREFIX = "[DEBUG]"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Marks handlers installed by setup_logging so a later call only swaps those
_OWNED_ATTR = "_heightpatch_handler"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger or one of its children."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def default_logger_func(name: Optional[str] = None) -> Callable[[str], None]:
    """Return a ``logger_func`` bound to the package logger."""
    logger = get_logger(name)

    def log(message: str) -> None:
        if message.startswith(DEBUG_PREFIX):
            logger.debug(message[len(DEBUG_PREFIX):].lstrip())
        else:
            logger.info(message)

    return log


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None, stream=None) -> logging.Logger:
    """
    Attach console and optional file handlers to the 'heightpatch' logger.

    Handlers from an earlier call are replaced; handlers the host installed
    itself are kept.

    Args:
        level: Logging level; DEBUG if ``config.DEBUG_WORKER_LOGGING`` is set,
            INFO otherwise
        log_file: Optional path to also write the log to
        stream: Console stream, ``sys.stderr`` by default

    Returns:
        The configured package logger
    """
    if level is None:
        level = logging.DEBUG if config.DEBUG_WORKER_LOGGING else logging.INFO

    logger = get_logger()
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        logger.addHandler(handler)
    return logger
