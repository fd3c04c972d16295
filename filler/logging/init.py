from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging with level labels.

Each stdout line starts with a label (DEBUG, INFO, WARN, ERROR, SUMMARY) so
runs can be grepped. Modules log through ``logging.getLogger(__name__)``; the
one handler is attached to the ``filler`` package logger, which does not
propagate to the root logger.
"""

__all__ = [
    "SUMMARY_LEVEL",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

SUMMARY_LEVEL = 25  # between INFO and WARNING
LOGGER_NAME = "filler"

_HANDLER_TAG = "_filler_console"


class LabeledFormatter(logging.Formatter):
    """``<LABEL> <message>``; WARNING is shortened to WARN."""

    LABELS = {
        logging.WARNING: "WARN",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_TAG, False):
            return handler
    return None


def setup_logging(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled stdout handler to the package logger.

    Calling it again returns the same logger without adding a second handler.
    """
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    if _console_handler(logger) is None:
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(LabeledFormatter())
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    if debug:
        set_debug(logger)
    return logger


def get_logger() -> logging.Logger:
    return setup_logging()


def set_debug(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")


def log_summary(message: str) -> None:
    """Log ``message`` at SUMMARY level (the label is added by the formatter)."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Detach the console handler; tests call this between cases."""
    logger = logging.getLogger(LOGGER_NAME)
    handler = _console_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
