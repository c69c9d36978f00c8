"""JSON logging to stdout with per-request correlation.

Every record carries ``request_id``; inside a request it also carries the
HTTP ``method`` and ``path``, and ``user_id`` once a session was resolved.
Services add event fields through ``extra=`` (see :data:`EXTRA_KEYS`).
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# ``extra=`` keys copied into the JSON payload when present
EXTRA_KEYS = ("method", "path", "endpoint", "elapsed_ms", "user_id", "kind", "status")

access_log = logging.getLogger("channelhub.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Attach ``request_id`` (always) plus request and session fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        if getattr(record, "method", None) is None:
            record.method = request.method
        if getattr(record, "path", None) is None:
            record.path = request.path
        user = g.get("current_user")
        if user is not None and getattr(record, "user_id", None) is None:
            record.user_id = user.id
        return True


def ensure_request_id() -> str:
    """Return the request's correlation id, adopting or minting one on first use."""

    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        incoming = next((request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None)
        g.request_id = incoming or str(uuid4())
    return str(g.request_id)


def configure_logging(level: str | int = "INFO") -> None:
    """Replace root handlers with a single JSON stdout handler at ``level``."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id, echo it back, and emit one access line per request."""

    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _start_request() -> None:
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        access_log.info(
            "request.completed",
            extra={"status": response.status_code, "elapsed_ms": elapsed_ms},
        )
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "RequestContextFilter"]
