# src/formula_usage/infrastructure/logging/logger.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""JSON logging on standard error.

Standard output carries the usage table, so every log line goes to stderr as
one JSON object:

    {"ts": "...", "level": "INFO", "logger": "...", "message": "report_usage.start",
     "content_type": 0, ...}

Fields passed through ``extra={...}`` are merged into the object. Records
carrying ``exc_info`` also get ``exc_type`` and ``exc_message``.

Usage:
    configure_root_logging()
    log = get_json_logger(__name__)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any

__all__ = ["configure_root_logging", "get_json_logger"]

# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def _exception_fields(record: logging.LogRecord) -> dict[str, str]:
    if not record.exc_info:
        return {}
    exc_type, exc_value, _ = record.exc_info
    fields: dict[str, str] = {}
    if exc_type is not None:
        fields["exc_type"] = exc_type.__name__
    if exc_value is not None:
        fields["exc_message"] = str(exc_value)
    return fields


class _JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in payload:
                payload[key] = value
        payload.update(_exception_fields(record))

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Set the root level and attach the stderr JSON handler once.

    Calling it again only changes the level.

    Args:
        level: Level number or name. Falls back to env ``LOG_LEVEL``, then ``INFO``.
    """
    root = logging.getLogger()

    if level is None:
        level = os.getenv("LOG_LEVEL") or "INFO"
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return the named logger; output reaches stderr through the root handler.

    Nothing is configured here; `configure_root_logging()` must run first for
    JSON output.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
