"""Shared API helpers: envelopes, cookies, uploads and service wiring."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request

from channelhub.core.extensions import get_object_storage
from channelhub.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from channelhub.services.accounts.dto import UploadIn
from channelhub.services.accounts.service import AccountService
from channelhub.services.profiles.service import ProfileQueryService
from channelhub.services.tokens.service import TokenService

F = TypeVar("F", bound=Callable[..., Any])


# ----------------------------- Responses ------------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def api_response(data: Any, *, message: str = "Success", status: int = 200) -> Response:
    """Wrap ``data`` in the ``{status, data, message}`` success envelope."""

    return json_response({"status": status, "data": data, "message": message}, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ----------------------------- Cookies --------------------------------------


def _cookie_options(max_age: timedelta | None = None) -> dict[str, Any]:
    opts: dict[str, Any] = {
        "httponly": True,
        "secure": bool(current_app.config.get("COOKIE_SECURE", True)),
        "samesite": current_app.config.get("COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }
    if max_age is not None:
        opts["max_age"] = int(max_age.total_seconds())
    return opts


def set_session_cookies(response: Response, *, access_token: str, refresh_token: str) -> Response:
    """Attach both session cookies, each living as long as its token."""

    cfg = current_app.config
    response.set_cookie(
        cfg["ACCESS_TOKEN_COOKIE"],
        access_token,
        **_cookie_options(cast(timedelta, cfg["ACCESS_TOKEN_EXPIRES"])),
    )
    response.set_cookie(
        cfg["REFRESH_TOKEN_COOKIE"],
        refresh_token,
        **_cookie_options(cast(timedelta, cfg["REFRESH_TOKEN_EXPIRES"])),
    )
    return response


def clear_session_cookies(response: Response) -> Response:
    cfg = current_app.config
    opts = _cookie_options()
    for name in (cfg["ACCESS_TOKEN_COOKIE"], cfg["REFRESH_TOKEN_COOKIE"]):
        response.delete_cookie(
            name,
            path=opts["path"],
            secure=opts["secure"],
            httponly=opts["httponly"],
            samesite=opts["samesite"],
        )
    return response


# ----------------------------- Uploads --------------------------------------


def upload_from_request(field: str) -> UploadIn | None:
    """Return the multipart file ``field`` as an :class:`UploadIn`, or ``None``."""

    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    return UploadIn(
        stream=storage.stream,
        filename=storage.filename,
        content_type=storage.mimetype or None,
    )


# ----------------------------- Services -------------------------------------


def build_token_service() -> TokenService:
    return TokenService(token_provider=JWTTokenProvider())


def build_account_service() -> AccountService:
    return AccountService(token_service=build_token_service(), storage=get_object_storage())


def build_profile_service() -> ProfileQueryService:
    return ProfileQueryService()
