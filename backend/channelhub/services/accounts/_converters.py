from __future__ import annotations

from channelhub.models.user import User

from .dto import UserPublicOut


def user_to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        fullname=user.fullname,
        avatar=user.avatar,
        cover_image=user.cover_image or "",
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
