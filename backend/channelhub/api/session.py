"""Request authentication: resolve the access token to the current user."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import current_app, g, request

from channelhub.api.deps import build_account_service, build_token_service
from channelhub.services._shared.errors import (
    InvalidTokenError,
    NotFoundError,
    UnauthenticatedError,
)
from channelhub.services.accounts.dto import UserPublicOut

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def parse_bearer(header: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    Anything other than exactly the ``Bearer`` scheme followed by one
    non-empty token yields ``None``.
    """
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1].strip():
        return None
    return parts[1]


def extract_access_token() -> str | None:
    """Access-token cookie first, then the Authorization header."""
    cookie = request.cookies.get(current_app.config.get("ACCESS_TOKEN_COOKIE", "access_token"))
    if cookie:
        return cookie
    return parse_bearer(request.headers.get("Authorization"))


def authenticate_request() -> UserPublicOut:
    """
    Verify the request's access token and load the sanitized user.

    :returns: The current user, also stored on ``g.current_user``.
    :raises UnauthenticatedError: No token, or the token/user does not check out.
    """
    token = extract_access_token()
    if not token:
        raise UnauthenticatedError("Unauthorized request")

    try:
        user_id = build_token_service().verify_access(token)
        user = build_account_service().get_current_user(user_id)
    except (InvalidTokenError, NotFoundError) as exc:
        logger.info("session.rejected reason=%s", exc.kind.value, extra={"kind": exc.kind.value})
        raise UnauthenticatedError("Invalid access token") from exc

    g.current_user = user
    return user


def require_session(func: F) -> F:
    """Reject the request with 401 unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        authenticate_request()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user() -> UserPublicOut:
    """Return the user attached by :func:`require_session`."""
    return cast(UserPublicOut, g.current_user)
