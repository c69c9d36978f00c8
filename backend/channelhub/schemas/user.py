"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserSchema(Schema):
    """Public representation of a user; never includes credentials."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    fullname = fields.String(required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)


class PasswordChangeSchema(Schema):
    old_password = fields.String(data_key="oldPassword", required=True)
    new_password = fields.String(
        data_key="newPassword", required=True, validate=validate.Length(min=1, max=128)
    )


class AccountUpdateSchema(Schema):
    """Partial profile update; omitted keys stay unchanged."""

    fullname = fields.String(load_default=None, validate=validate.Length(max=100))
    email = fields.Email(load_default=None, validate=validate.Length(max=254))
