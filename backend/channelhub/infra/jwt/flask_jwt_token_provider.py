"""JWT adapter: Flask-JWT-Extended for access tokens, PyJWT for refresh tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt as pyjwt
from flask import current_app
from flask_jwt_extended import create_access_token as _create_access
from flask_jwt_extended import decode_token as _decode_access
from flask_jwt_extended.exceptions import JWTExtendedException

from channelhub.services._shared.errors import InvalidTokenError
from channelhub.services._shared.ports import TokenProvider

REFRESH_TYPE = "refresh"
ACCESS_TYPE = "access"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Sign and decode session tokens.

    Access tokens go through Flask-JWT-Extended, keyed by ``JWT_SECRET_KEY``
    (mirrored from ``ACCESS_TOKEN_SECRET``). Refresh tokens are signed with
    PyJWT under ``REFRESH_TOKEN_SECRET`` because Flask-JWT-Extended uses one
    key for both token types.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def _refresh_secret(self) -> str:
        return cast(str, current_app.config["REFRESH_TOKEN_SECRET"])

    def _algorithm(self) -> str:
        return cast(str, current_app.config.get("JWT_ALGORITHM", "HS256"))

    def create_access_token(self, *, identity: int | str) -> str:
        # Flask-JWT-Extended stamps iat/exp/jti/type="access" itself.
        return cast(
            str,
            _create_access(
                identity=str(identity),
                expires_delta=cast(timedelta, current_app.config["ACCESS_TOKEN_EXPIRES"]),
            ),
        )

    def create_refresh_token(self, *, identity: int | str) -> str:
        now = datetime.now(UTC)
        ttl = cast(timedelta, current_app.config["REFRESH_TOKEN_EXPIRES"])
        payload = {
            "sub": str(identity),
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            "jti": uuid4().hex,
            "type": REFRESH_TYPE,
        }
        return pyjwt.encode(payload, self._refresh_secret(), algorithm=self._algorithm())

    def decode_access(self, token: str) -> dict[str, Any]:
        try:
            claims = cast(dict[str, Any], _decode_access(token))
        except (pyjwt.PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError(f"Access token rejected: {exc}") from exc
        if claims.get("type") != ACCESS_TYPE:
            raise InvalidTokenError("Not an access token")
        return claims

    def decode_refresh(self, token: str) -> dict[str, Any]:
        try:
            claims = cast(
                dict[str, Any],
                pyjwt.decode(
                    token,
                    self._refresh_secret(),
                    algorithms=[self._algorithm()],
                    options={"require": ["exp", "iat", "sub", "jti"]},
                ),
            )
        except pyjwt.PyJWTError as exc:
            raise InvalidTokenError(f"Refresh token rejected: {exc}") from exc
        if claims.get("type") != REFRESH_TYPE:
            raise InvalidTokenError("Not a refresh token")
        return claims
