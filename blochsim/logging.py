"""Logging utilities for blochsim.

Loggers live under the ``blochsim.`` namespace and write to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Union

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = '[%(levelname)s] %(name)s: %(message)s'

_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger for the given module name.

    Loggers are cached so handlers are only attached once.

    Args:
        name: Logger name (typically ``__name__``). Defaults to "blochsim".

    Returns:
        Configured logger instance.
    """
    if name is None:
        name = "blochsim"

    logger_name = name if name.startswith("blochsim") else f"blochsim.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def set_log_level(level: Union[int, str]) -> None:
    """Set the level of every blochsim logger, including ones created later."""
    global _DEFAULT_LEVEL
    level = _coerce_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    _DEFAULT_LEVEL = level


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """
    Reconfigure handlers of all blochsim loggers.

    Args:
        level: Logging level (default: WARNING)
        format_string: Custom format string
        stream: Output stream (default: sys.stderr)
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _DEFAULT_LEVEL = level
