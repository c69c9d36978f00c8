"""Error handlers rendering every failure as RFC 7807 ``application/problem+json``.

Service errors carry a closed :class:`ErrorKind`; :data:`STATUS_BY_KIND`
gives each kind exactly one HTTP status and the kind value becomes the
problem ``code``. The three token kinds share one public code and message,
so a client cannot tell an expired token from a revoked or reused one; the
real kind only reaches the logs.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from channelhub.core.logger import ensure_request_id
from channelhub.services._shared.errors import ErrorKind, ServiceError

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: HTTPStatus.UNAUTHORIZED,
    ErrorKind.TOKEN_REVOKED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.TOKEN_STALE: HTTPStatus.UNAUTHORIZED,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.PERSISTENCE: HTTPStatus.INTERNAL_SERVER_ERROR,
}

TOKEN_KINDS = frozenset({ErrorKind.INVALID_TOKEN, ErrorKind.TOKEN_REVOKED, ErrorKind.TOKEN_STALE})
TOKEN_PUBLIC_MESSAGE = "Invalid or expired token"
SERVER_ERROR_MESSAGE = "Unexpected error"

# Codes for werkzeug HTTP exceptions raised outside the services
HTTP_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_server_error",
}


def build_problem(
    status: int, code: str, message: str, details: dict[str, Any] | None = None
) -> dict[str, Any]:
    """
    Assemble a problem document for the current request.

    :param status: HTTP status code.
    :param code: Stable machine-readable code (an :class:`ErrorKind` value
        for service errors).
    :param message: Client-safe summary, sent as ``detail``.
    :param details: Optional structured extras (e.g. field errors).
    :returns: Problem details dictionary including ``request_id``.
    """
    status = int(status)
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if has_request_context() else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    return problem


def problem_for_service_error(err: ServiceError) -> tuple[dict[str, Any], int]:
    """
    Translate a tagged service error into ``(problem, status)``.

    Token kinds collapse to ``unauthorized`` with one message; 5xx kinds keep
    their code but hide the internal message.
    """
    status = int(STATUS_BY_KIND.get(err.kind, HTTPStatus.INTERNAL_SERVER_ERROR))
    if err.kind in TOKEN_KINDS:
        code, message = ErrorKind.UNAUTHORIZED.value, TOKEN_PUBLIC_MESSAGE
    elif status >= 500:
        code, message = err.kind.value, SERVER_ERROR_MESSAGE
    else:
        code, message = err.kind.value, err.message
    return build_problem(status, code, message), status


def _respond(problem: dict[str, Any]) -> tuple[Response, int]:
    resp = jsonify(problem)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, int(problem["status"])


def init_app(app: Flask) -> None:
    """Register the problem+json handlers; 4xx log as warnings, 5xx with tracebacks."""

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        problem, status = problem_for_service_error(err)
        extra = {"kind": err.kind.value, "status": status}
        if status >= 500:
            log.error("service_error kind=%s msg=%s", err.kind.value, err.message, exc_info=err, extra=extra)
        else:
            log.warning("service_error kind=%s msg=%s", err.kind.value, err.message, extra=extra)
        return _respond(problem)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = HTTP_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        level = log.error if status >= 500 else log.warning
        level("http_error code=%s", code, extra={"status": status})
        return _respond(build_problem(status, code, message))

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(err: SchemaValidationError):
        fields = sorted(err.messages) if isinstance(err.messages, dict) else []
        log.warning(
            "schema_error fields=%s",
            fields,
            extra={"kind": ErrorKind.VALIDATION.value, "status": 400},
        )
        return _respond(
            build_problem(
                HTTPStatus.BAD_REQUEST,
                ErrorKind.VALIDATION.value,
                "Validation failed",
                {"errors": err.messages},
            )
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Constraint names and SQL stay in the logs
        log.error("integrity_error escaped the service layer", exc_info=err)
        return _respond(
            build_problem(HTTPStatus.BAD_REQUEST, ErrorKind.CONFLICT.value, "Resource conflict")
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled_exception", exc_info=err)
        return _respond(
            build_problem(
                HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", SERVER_ERROR_MESSAGE
            )
        )
