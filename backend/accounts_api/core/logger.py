"""JSON log lines on stdout, each tagged with the request correlation id.

Services log with ``extra={"event": ..., "identity_id": ...}``; those keys
become top-level fields of the emitted object. Token values and passwords are
never passed to the logger.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Inbound headers accepted as the correlation id, first match wins.
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

EXTRA_KEYS = ("event", "identity_id", "endpoint", "elapsed_ms", "status")


def ensure_request_id() -> str:
    """Return the id for the current request, adopting or minting it once.

    Outside a request a fresh id is returned on every call.
    """
    if not has_request_context():
        return uuid4().hex
    current = g.get("request_id")
    if current is None:
        inbound = (request.headers.get(name) for name in INBOUND_ID_HEADERS)
        current = next((value for value in inbound if value), None) or uuid4().hex
        g.request_id = current
    return current


class RequestContextFilter(logging.Filter):
    """Attach ``request_id``, ``method`` and ``path`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        in_request = has_request_context()
        record.request_id = ensure_request_id() if in_request else None
        record.method = request.method if in_request else None
        record.path = request.path if in_request else None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if getattr(record, "path", None):
            entry["http"] = {"method": record.method, "path": record.path}
        entry.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str | int = "INFO") -> None:
    """Replace root handlers with a single JSON stdout handler at ``level``.

    Unknown level names fall back to ``INFO``.
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def init_app(app: Flask) -> None:
    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _adopt_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "RequestContextFilter", "configure_logging", "ensure_request_id", "init_app"]
