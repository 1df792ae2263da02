"""Logger setup shared by the generator and its CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "surqlbind"

_CONSOLE_FORMAT = "[surqlbind] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the logger for one pipeline component (``scanner``, ``render``...)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER)


def _attach(
    logger: logging.Logger, handler: logging.Handler, level: int, fmt: str
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send surqlbind records to stderr, and to ``log_file`` when given.

    Generated code may be printed on stdout, so diagnostics never go there.
    Calling this again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(sys.stderr), level, _CONSOLE_FORMAT)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        _attach(logger, file_handler, logging.DEBUG, _FILE_FORMAT)

    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
