"""Logging configuration for the resume ingestion pipeline."""

import logging
import sys
from typing import Optional

from resume_ingest.config import LOG_LEVEL

ROOT_LOGGER_NAME = "resume_ingest"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _package_root() -> logging.Logger:
    """Package root logger; the only one carrying a handler."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return root


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a logger under the package root. Module loggers propagate to the root handler."""
    _package_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
