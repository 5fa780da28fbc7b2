"""JSON logging for liftlog.

Services log each successful mutation once, passing identifiers through
``extra`` (``logger.info("Set logged", extra={"set_id": 7})``). The formatter
copies the known identifier keys into the JSON line; anything else in
``extra`` stays off the output.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Identifier keys services pass through ``extra``
EXTRA_KEYS = (
    "user_id",
    "workout_id",
    "workout_exercise_id",
    "set_id",
    "exercise_id",
    "source_workout_id",
    "count",
    "fields",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message, request id, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({k: getattr(record, k) for k in EXTRA_KEYS if hasattr(record, k)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on records emitted inside a Flask request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Return the correlation id of the current request.

    The first ``X-Request-ID`` / ``X-Correlation-ID`` header wins; otherwise a
    UUID4 is generated and kept on ``flask.g`` for the rest of the request.
    Outside a request every call returns a fresh UUID4.
    """
    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        incoming = next(
            (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None
        )
        g.request_id = incoming or str(uuid4())
    return g.request_id


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with one JSON stdout handler at ``level``."""
    level_no = _level_number(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_no)


def init_app(app: Flask) -> None:
    """Stamp request ids on records logged through ``app.logger``."""
    app.logger.addFilter(RequestIdFilter())


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
