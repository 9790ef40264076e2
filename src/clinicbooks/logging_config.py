"""Logging setup for clinicbooks.

All loggers live under the ``clinicbooks`` namespace so the CLI (or an
embedding application) can configure the whole package in one place.
"""

import logging
import os
import sys
import threading
from typing import Any, Optional

__all__ = [
    "get_logger",
    "configure_logging",
    "reset_logging",
    "level_from_env",
]

_LOGGER_PREFIX = "clinicbooks"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False
_lock = threading.Lock()


class _StderrHandler(logging.StreamHandler):
    """Stream handler that writes to sys.stderr as it is at emit time."""

    def __init__(self, level: int = logging.NOTSET):
        super().__init__(sys.stderr)
        self.setLevel(level)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the clinicbooks namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def level_from_env(default: int = logging.WARNING) -> int:
    """Read the log level from CLINICBOOKS_LOG_LEVEL (e.g. 'INFO', 'DEBUG')."""
    value = os.environ.get("CLINICBOOKS_LOG_LEVEL")
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(
    *,
    level: Optional[int] = None,
    stream: Any = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Configure the clinicbooks logger hierarchy (idempotent).

    Args:
        level: Log level; defaults to CLINICBOOKS_LOG_LEVEL or WARNING
        stream: Stream for the default handler (stderr if None)
        handler: Custom handler, replaces the default stream handler
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level if level is not None else level_from_env())
    root_logger.propagate = False

    if handler is not None:
        h = handler
    elif stream is not None:
        h = logging.StreamHandler(stream)
    else:
        h = _StderrHandler()
    h.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
