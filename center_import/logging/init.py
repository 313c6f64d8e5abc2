from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Operator-facing log output.

Each line the importer prints is ``LABEL message`` with LABEL one of
DEBUG / INFO / WARN / ERROR / SUMMARY, so wrapper scripts can grep an import
run without parsing timestamps. Module loggers are created with
logging.getLogger(__name__) and therefore sit below the "center_import"
logger; configuring that one logger covers the whole package.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "center_import"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_HANDLER_NAME = "center_import.stdout"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message`` lines; tracebacks, when attached, follow on the next lines."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        text = f"{label} {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled handler to the package logger and return it.

    Calling it again returns the already configured logger untouched. The
    package logger does not propagate, so nothing is printed twice when the
    host application configured the root logger too.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    _drop_handlers(logger)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(logger: logging.Logger) -> None:
    """Lower the logger and its handlers to DEBUG (the --debug flag)."""
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    # formatter prepends "SUMMARY "
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger and detach its handlers (used between tests)."""
    global _logger
    if _logger is not None:
        _drop_handlers(_logger)
    _logger = None
