"""Unit tests for :class:`JWTTokenProvider`."""

from __future__ import annotations

from datetime import timedelta

import jwt as pyjwt
import pytest

from channelhub.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from channelhub.services._shared.errors import InvalidTokenError


@pytest.fixture()
def provider() -> JWTTokenProvider:
    return JWTTokenProvider()


def test_access_token_claims(provider, app):
    claims = provider.decode_access(provider.create_access_token(identity=7))

    assert claims["sub"] == "7"
    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()


def test_refresh_token_claims(provider, app):
    claims = provider.decode_refresh(provider.create_refresh_token(identity=7))

    assert claims["sub"] == "7"
    assert claims["type"] == "refresh"
    assert claims["jti"]
    assert claims["exp"] - claims["iat"] == app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()


def test_refresh_tokens_get_fresh_jti(provider):
    first = provider.decode_refresh(provider.create_refresh_token(identity=7))
    second = provider.decode_refresh(provider.create_refresh_token(identity=7))

    assert first["jti"] != second["jti"]


def test_secrets_are_distinct(provider, app):
    assert app.config["ACCESS_TOKEN_SECRET"] != app.config["REFRESH_TOKEN_SECRET"]
    with pytest.raises(InvalidTokenError):
        provider.decode_refresh(provider.create_access_token(identity=1))
    with pytest.raises(InvalidTokenError):
        provider.decode_access(provider.create_refresh_token(identity=1))


def test_refresh_with_wrong_type_claim_rejected(provider, app):
    token = pyjwt.encode(
        {"sub": "1", "iat": 0, "exp": 4102444800, "jti": "x", "type": "access"},
        app.config["REFRESH_TOKEN_SECRET"],
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError, match="Not a refresh token"):
        provider.decode_refresh(token)


def test_tampered_refresh_rejected(provider):
    token = provider.create_refresh_token(identity=1)
    head, body, sig = token.split(".")
    tampered = ".".join([head, body, sig[::-1]])
    with pytest.raises(InvalidTokenError):
        provider.decode_refresh(tampered)


def test_expired_refresh_rejected(provider, app, freeze_time):
    with freeze_time("2026-01-01 00:00:00"):
        token = provider.create_refresh_token(identity=1)
    assert app.config["REFRESH_TOKEN_EXPIRES"] <= timedelta(days=10)
    with freeze_time("2026-01-11 00:00:01"), pytest.raises(InvalidTokenError):
        provider.decode_refresh(token)
