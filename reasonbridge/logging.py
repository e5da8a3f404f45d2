"""
Structured Logging — JSON Output for Production

Configures Python logging to emit structured JSON logs.
Each log entry includes timestamp, level, module, and
any feedback context fields passed via ``extra``.

Usage:
    from reasonbridge.logging import feedback_fields, get_logger
    logger = get_logger("tone")
    logger.debug("Tone signal detected", extra=feedback_fields(candidate))
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


LOG_LEVEL = os.getenv("REASONBRIDGE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("REASONBRIDGE_LOG_FORMAT", "json")  # "json" or "text"

_EXTRA_FIELDS = (
    "feedback_id", "response_id", "feedback_type", "subtype", "confidence",
    "sensitivity", "candidates", "ready_to_post", "duration_ms",
    "status_code", "method", "path", "error", "error_type", "key_id",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging():
    """Configure the reasonbridge root logger. Call once at app startup."""
    root = logging.getLogger("reasonbridge")
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the reasonbridge namespace."""
    return logging.getLogger(f"reasonbridge.{name}")


def feedback_fields(item: Any) -> dict:
    """
    Log extras describing one feedback item.

    Works for a detector candidate (no id yet) and for a persisted
    Feedback row. Absent values are left out.
    """
    fields = {
        "feedback_id": getattr(item, "id", None),
        "response_id": getattr(item, "response_id", None),
        "feedback_type": getattr(item.type, "value", item.type),
        "subtype": item.subtype,
        "confidence": item.confidence_score,
    }
    return {key: val for key, val in fields.items() if val is not None}
