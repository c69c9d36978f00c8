"""Assertion helper utilities for tests."""

from __future__ import annotations

from typing import Any

SANITIZED_USER_KEYS = {
    "id",
    "username",
    "email",
    "fullname",
    "avatar",
    "coverImage",
    "createdAt",
    "updatedAt",
}


def assert_envelope(payload: dict[str, Any], status: int) -> Any:
    """Check the ``{status, data, message}`` envelope and return ``data``."""
    assert set(payload) == {"status", "data", "message"}
    assert payload["status"] == status
    assert isinstance(payload["message"], str)
    return payload["data"]


def assert_sanitized_user(data: dict[str, Any]) -> None:
    """Public user payloads carry exactly the safe keys."""
    assert set(data) == SANITIZED_USER_KEYS
    for secret in ("password", "password_hash", "passwordHash", "refreshToken", "refresh_token"):
        assert secret not in data


def assert_problem(response, status: int, code: str) -> dict[str, Any]:
    """Check an RFC 7807 error response and return its body."""
    assert response.status_code == status
    assert response.mimetype == "application/problem+json"
    body = response.get_json()
    assert body["status"] == status
    assert body["code"] == code
    assert body["request_id"]
    return body
