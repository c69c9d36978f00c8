"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

import pytest
from flask import g

from channelhub.core.logger import (
    JSONFormatter,
    RequestContextFilter,
    configure_logging,
    ensure_request_id,
)
from tests.factories.user import UserFactory


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "user.login", **extra) -> logging.LogRecord:
    record = logging.LogRecord("channelhub.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_logging_sets_level(restore_root_logger) -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)


def test_json_formatter_includes_known_extras() -> None:
    payload = json.loads(JSONFormatter().format(_record(user_id=5, kind="token_stale", secret="x")))

    assert payload["message"] == "user.login"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == 5
    assert payload["kind"] == "token_stale"
    assert "secret" not in payload
    assert payload["request_id"] is None


def test_filter_adopts_incoming_request_id(app) -> None:
    with app.test_request_context("/api/v1/health", headers={"X-Request-ID": "abc-123"}):
        record = _record()
        assert RequestContextFilter().filter(record) is True
        assert record.request_id == "abc-123"
        assert record.method == "GET"
        assert record.path == "/api/v1/health"
        assert ensure_request_id() == "abc-123"


def test_filter_adds_session_user(app) -> None:
    user = UserFactory()
    with app.test_request_context("/"):
        g.current_user = user
        record = _record()
        RequestContextFilter().filter(record)
        assert record.user_id == user.id


def test_request_id_generated_once_per_request(app) -> None:
    with app.test_request_context("/"):
        first = ensure_request_id()
        assert first
        assert ensure_request_id() == first


def test_access_line_logged_per_request(client, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="channelhub.access"):
        client.get("/api/v1/health")

    (record,) = [r for r in caplog.records if r.name == "channelhub.access"]
    assert record.getMessage() == "request.completed"
    assert record.status == 200
