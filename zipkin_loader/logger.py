"""Shared logger for the loader.

Every module logs through ``from zipkin_loader.logger import logger``.
Diagnostics go to stderr so dry-run output on stdout stays machine readable.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_logger() -> logging.Logger:
    log = logging.getLogger("zipkin_loader")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(logging.INFO)
    return log


logger = _build_logger()


def set_log_level(level: str) -> None:
    """Set the loader log level by name (DEBUG, INFO, ...)."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
