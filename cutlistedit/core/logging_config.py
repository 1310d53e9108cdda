"""Logging setup for the ``cutlistedit`` package loggers."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .paths import data_path

LOGGER_NAME = "cutlistedit"
LOG_FILENAME = "cutlistedit.log"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def default_log_path() -> Path:
    """Log file inside the data directory (see ``CUTLISTEDIT_HOME``)."""
    return data_path("logs", LOG_FILENAME)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the ``cutlistedit`` logger and return it.

    Console output goes to stderr so command output on stdout stays clean.
    When ``log_file`` is given, records are also appended to a rotating file
    (parent directories are created). Calling it again replaces the handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at level %s.", logging.getLevelName(level))
    return logger


__all__ = ["LOGGER_NAME", "default_log_path", "setup_logging"]
