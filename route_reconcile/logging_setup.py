"""
Logging for reconciliation runs.

Records go to stderr either as one JSON document per line (the default, easy to
grep and ship) or as plain console text. ``LOG_LEVEL`` and ``LOG_FORMAT``
(``json``/``text``) override whatever the caller asks for.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

# Pipeline attributes passed through ``extra=``
EXTRA_ATTRIBUTES = ("stage", "airport", "status_code", "source_airport", "destination_airport", "counters")
LOG_FORMATS = ("json", "text")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    extras = {}
    for attr in EXTRA_ATTRIBUTES:
        value = getattr(record, attr, None)
        if value is not None:
            extras[attr] = value
    return extras


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


class ConsoleFormatter(logging.Formatter):
    """``LEVEL stage: message`` with the airport or route appended when known."""

    def format(self, record: logging.LogRecord) -> str:
        extras = _extras(record)
        prefix = record.levelname
        if "stage" in extras:
            prefix = f"{prefix} {extras['stage']}"
        line = f"{prefix}: {record.getMessage()}"
        if "airport" in extras:
            line = f"{line} [{extras['airport']}]"
        elif "source_airport" in extras:
            line = f"{line} [{extras['source_airport']}-{extras.get('destination_airport', '')}]"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}; expected one of {', '.join(LOG_FORMATS)}")
    return JsonFormatter() if log_format == "json" else ConsoleFormatter()


def setup_logging(default_level: str | int = logging.INFO, default_format: str = "json") -> None:
    """Configure the root logger; existing stream handlers are reformatted rather than duplicated."""
    level = os.environ.get("LOG_LEVEL") or default_level
    if isinstance(level, str):
        level = level.upper()
    log_format = (os.environ.get("LOG_FORMAT") or "").strip().lower()
    if log_format not in LOG_FORMATS:
        log_format = default_format
    formatter = build_formatter(log_format)

    root = logging.getLogger()
    root.setLevel(level)
    streams = [handler for handler in root.handlers if isinstance(handler, logging.StreamHandler)]
    if streams:
        for handler in streams:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)
