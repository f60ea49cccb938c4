"""Logging setup shared by the typst-count entry points."""

from __future__ import annotations

import logging
import sys

from typst_count.config import TYPST_COUNT_LOG_LEVEL

_PACKAGE_LOGGER = "typst_count"
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class MaxLevelFilter(logging.Filter):
    """Allow through only records <= a given level."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self.max_level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach stdout/stderr handlers to the package logger once.

    INFO and below go to stdout, WARNING and above to stderr.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if level is not None:
        logger.setLevel(level)
    if getattr(logger, "_typst_count_configured", False):
        return logger
    if level is None:
        logger.setLevel(TYPST_COUNT_LOG_LEVEL)

    formatter = logging.Formatter(_FORMAT)

    info_handler = logging.StreamHandler(sys.stdout)
    info_handler.setLevel(logging.DEBUG)
    info_handler.addFilter(MaxLevelFilter(logging.INFO))
    info_handler.setFormatter(formatter)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)

    logger.addHandler(info_handler)
    logger.addHandler(error_handler)
    logger.propagate = False
    logger._typst_count_configured = True  # type: ignore[attr-defined]
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the configured package logger."""
    configure_logging()
    return logging.getLogger(name)
