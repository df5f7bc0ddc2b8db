"""Logging setup. Everything goes to stderr; stdout carries the book JSON."""

from __future__ import annotations

import json
import logging
import sys
from typing import Literal

LogLevel = Literal["debug", "info", "warn", "error"]
LogFormat = Literal["text", "json"]

LOG_ENV_VAR = "MDBOOK_D2_LOG"

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] (%(name)s): %(message)s"

_handler: logging.Handler | None = None


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: LogLevel = "info", fmt: LogFormat = "text") -> None:
    """Point the root logger at stderr with the given level and format."""
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(_LEVELS)}")
    if fmt not in ("text", "json"):
        raise ValueError(f"Unknown log format {fmt!r}, expected text or json")

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = handler
    root.addHandler(handler)
    root.setLevel(_LEVELS[level])
