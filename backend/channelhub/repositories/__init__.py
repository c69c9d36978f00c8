"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from channelhub.repositories.base import BaseRepository
from channelhub.repositories.profile import ProfileRepository
from channelhub.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "UserRepository",
]
