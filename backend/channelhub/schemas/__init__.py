"""Marshmallow schemas for request validation and response shaping."""

from .auth import (
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .profile import ChannelProfileSchema, OwnerSchema, WatchHistoryItemSchema
from .user import AccountUpdateSchema, PasswordChangeSchema, UserSchema

__all__ = [
    "AccountUpdateSchema",
    "ChannelProfileSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "OwnerSchema",
    "PasswordChangeSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
    "WatchHistoryItemSchema",
]
