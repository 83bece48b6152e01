"""Logging for the ``finance_tracker`` package.

Modules call ``get_logger(__name__)`` and never attach handlers. The CLI
calls ``configure_logging`` once per process: a console handler on stderr
and, when the bootstrap config names one, a rotating log file.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import IO

PKG_LOGGER_NAME = "finance_tracker"
LOG_LEVEL_ENV = "FINANCE_TRACKER_LOG_LEVEL"

_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_LOG_FILE_MAX_BYTES = 1_000_000
_LOG_FILE_BACKUPS = 3

# Handlers installed by configure_logging, removed again on reconfigure/reset
_installed: list[logging.Handler] = []


def parse_level(level: int | str | None) -> int:
    """Level from an int, a name ("debug") or a numeric string.

    None reads FINANCE_TRACKER_LOG_LEVEL; anything unrecognised is INFO.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    log_file: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Logger:
    """Point the package logger at ``stream`` (and ``log_file`` if given).

    Calling it again replaces the handlers from the previous call.
    """
    logger = logging.getLogger(PKG_LOGGER_NAME)
    _remove_installed(logger)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    console = logging.StreamHandler(stream)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file, maxBytes=_LOG_FILE_MAX_BYTES, backupCount=_LOG_FILE_BACKUPS, encoding="utf-8"
            )
        except OSError as exc:
            logger.warning("Cannot open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            handlers.append(file_handler)

    for h in handlers:
        logger.addHandler(h)
        _installed.append(h)
    logger.setLevel(parse_level(level))
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Undo ``configure_logging``: drop its handlers and propagate to root again."""
    logger = logging.getLogger(PKG_LOGGER_NAME)
    _remove_installed(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


def _remove_installed(logger: logging.Logger) -> None:
    while _installed:
        h = _installed.pop()
        logger.removeHandler(h)
        h.close()
