"""Unit tests for the logging utilities."""

from __future__ import annotations

import json
import logging

from accounts_api.core.logger import (
    JSONFormatter,
    RequestContextFilter,
    configure_logging,
    ensure_request_id,
)


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")
    try:
        assert logging.getLogger().level == logging.DEBUG
    finally:
        configure_logging("INFO")


def test_json_formatter_includes_event_extras() -> None:
    record = logging.LogRecord("unit", logging.INFO, __file__, 1, "User %s", ("in",), None)
    record.event = "session.login"
    record.identity_id = 5

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "User in"
    assert payload["level"] == "INFO"
    assert payload["event"] == "session.login"
    assert payload["identity_id"] == 5


def test_request_id_is_echoed(client) -> None:
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(app, db) -> None:
    resp = app.test_client().get("/api/v1/health")

    assert resp.headers.get("X-Request-ID")


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging("CHATTY")
    try:
        assert logging.getLogger().level == logging.INFO
    finally:
        configure_logging("INFO")


def test_context_filter_stamps_request_fields(app) -> None:
    record = logging.LogRecord("unit", logging.INFO, __file__, 1, "hello", (), None)

    with app.test_request_context("/api/v1/health", headers={"X-Correlation-ID": "corr-7"}):
        RequestContextFilter().filter(record)
        assert ensure_request_id() == "corr-7"

    payload = json.loads(JSONFormatter().format(record))
    assert payload["request_id"] == "corr-7"
    assert payload["http"] == {"method": "GET", "path": "/api/v1/health"}


def test_context_filter_outside_request() -> None:
    record = logging.LogRecord("unit", logging.INFO, __file__, 1, "boot", (), None)

    RequestContextFilter().filter(record)
    payload = json.loads(JSONFormatter().format(record))

    assert payload["request_id"] is None
    assert "http" not in payload
