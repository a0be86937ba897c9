"""Logging setup: level filtering and timestamped stderr output."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

LOGGER_NAME = "sysgoss"
TRACE = 5

logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_NAMES = {number: name for name, number in LEVELS.items()}


class TimestampedFormatter(logging.Formatter):
    """Prefixes each record with an RFC 3339 UTC timestamp and its level tag."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        name = _NAMES.get(record.levelno, record.levelname)
        text = f"{stamp.strftime('%Y-%m-%dT%H:%M:%SZ')} [{name}] {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class _StderrHandler(logging.Handler):
    """Writes to whatever ``sys.stderr`` is at the time of each record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
            stream = sys.stderr
            stream.write(text + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def set_log_level(level: str) -> None:
    """Send package logs to stderr at ``level``; raise ValueError for unknown levels."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in [h for h in logger.handlers if isinstance(h, _StderrHandler)]:
        logger.removeHandler(handler)
    handler = _StderrHandler()
    handler.setFormatter(TimestampedFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(logging.INFO)

    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Unsupported log level: {level}")
    logger.setLevel(LEVELS[name])
    logger.debug("Setting log level to %s", name)