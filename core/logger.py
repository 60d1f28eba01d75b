# core/logger.py

"""
Package logger for the ledger and the grading and attendance computations.

Every module logs through a child of the "ledger" logger. The starting level comes from the
LEDGER_LOG_LEVEL environment variable (INFO if unset or unrecognized) and can be changed at
runtime with `set_log_level()`.
"""

import logging
import os
import sys

LOGGER_NAME = "ledger"
LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"
DEFAULT_LEVEL = logging.INFO


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int) and not isinstance(level, bool):
        return level

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved

    return DEFAULT_LEVEL


_logger = logging.getLogger(LOGGER_NAME)
if not _logger.handlers:
    _logger.setLevel(_resolve_level(os.environ.get(LOG_LEVEL_ENV)))
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    if name:
        return _logger.getChild(name)
    return _logger


def set_log_level(level: int | str) -> int:
    """
    Sets the level of the package logger, e.g. `set_log_level("DEBUG")` to trace GPA calculations.

    Unrecognized level names fall back to INFO. Returns the level that was applied.
    """
    resolved = _resolve_level(level)
    _logger.setLevel(resolved)
    return resolved
