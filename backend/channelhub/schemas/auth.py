"""Session-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from .user import UserSchema


class RegisterSchema(Schema):
    """Form fields of the multipart registration request (files come separately)."""

    class Meta:
        unknown = EXCLUDE

    fullname = fields.String(required=True, validate=validate.Length(max=100))
    username = fields.String(required=True, validate=validate.Length(max=50))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(max=128))


class LoginSchema(Schema):
    """Credentials: ``username`` or ``email``, plus ``password``."""

    username = fields.String(load_default=None)
    email = fields.String(load_default=None)
    password = fields.String(required=True)


class RefreshSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(load_default=None)


class TokenPairSchema(Schema):
    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class LoginResponseSchema(TokenPairSchema):
    """Login result: sanitized user plus both tokens."""

    user = fields.Nested(UserSchema, required=True)
