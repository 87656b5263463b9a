"""Logging helpers."""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, TextIO

LEVEL_ENV = "AI_WRITER_LOG_LEVEL"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render log records as compact JSON lines."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name or number (or ``AI_WRITER_LOG_LEVEL``) into a logging level."""
    if level is None:
        level = os.getenv(LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    *,
    level: int | str | None = None,
    structured: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure root logging; JSON unless ``structured`` is False.

    Output goes to stderr so stdout stays free for articles and reports.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    formatter: logging.Formatter
    if structured is False:
        formatter = logging.Formatter(PLAIN_FORMAT)
    else:
        formatter = JsonFormatter()

    if root.handlers:
        if structured is None:
            return
        for handler in root.handlers:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger", "resolve_level"]
