"""Logging utilities for recordgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "recordgen"
_CONSOLE_FORMAT = "[recordgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DIAGNOSTICS_LOGGER = f"{_LOGGER_NAME}.diagnostics"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the recordgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route recordgen logs to stderr, and to ``log_file`` at debug level when given.

    Diagnostics are printed by the CLI itself, so unless ``verbose`` is set the
    console skips the reporter's records and shows only warnings.
    """
    console_level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = _handler(logging.StreamHandler(), console_level, _CONSOLE_FORMAT)
    if not verbose:
        console.addFilter(_skip_diagnostics)
    logger.addHandler(console)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        logger.addHandler(_handler(file_handler, logging.DEBUG, _FILE_FORMAT))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)
    return logger


def _skip_diagnostics(record: logging.LogRecord) -> bool:
    return record.name != _DIAGNOSTICS_LOGGER


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["configure_logging", "get_logger"]
