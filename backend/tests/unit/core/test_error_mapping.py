"""Unit tests for the service-error to HTTP problem translation."""

from __future__ import annotations

import pytest

from channelhub.core.errors import STATUS_BY_KIND, TOKEN_PUBLIC_MESSAGE, problem_for_service_error
from channelhub.services._shared.errors import (
    ConflictError,
    ErrorKind,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    TokenRevokedError,
    TokenStaleError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (ValidationError("Avatar file is required"), 400, "validation_error"),
        (ConflictError("User", "username or email already exists"), 400, "conflict"),
        (UnauthenticatedError("Unauthorized request"), 401, "unauthenticated"),
        (UnauthorizedError("Invalid user credentials"), 401, "unauthorized"),
        (NotFoundError("User", "ghost"), 404, "not_found"),
    ],
)
def test_client_errors_keep_their_message(app, error, status, code):
    with app.test_request_context("/api/v1/users/login"):
        problem, got = problem_for_service_error(error)

    assert got == status
    assert problem["status"] == status
    assert problem["code"] == code
    assert problem["detail"] == error.message
    assert problem["instance"] == "/api/v1/users/login"
    assert problem["request_id"]


@pytest.mark.parametrize(
    "error",
    [InvalidTokenError("signature mismatch"), TokenRevokedError(), TokenStaleError()],
)
def test_token_failures_are_indistinguishable(app, error):
    with app.test_request_context("/api/v1/users/refresh-token"):
        problem, status = problem_for_service_error(error)

    assert status == 401
    assert problem["code"] == "unauthorized"
    assert problem["detail"] == TOKEN_PUBLIC_MESSAGE


def test_persistence_error_hides_details(app):
    with app.test_request_context("/"):
        problem, status = problem_for_service_error(PersistenceError("disk full on /var/lib"))

    assert status == 500
    assert problem["code"] == "persistence_error"
    assert "disk" not in problem["detail"]
