from __future__ import annotations

import logging

from channelhub.repositories.profile import ProfileRepository
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import NotFoundError, ValidationError
from channelhub.services.profiles.dto import ChannelProfileOut, OwnerOut, WatchHistoryItemOut

logger = logging.getLogger(__name__)


class ProfileQueryService(BaseService):
    """Read-only social-graph views. Every call runs in a read-only UoW."""

    def channel_profile(self, username: str, *, viewer_id: int | None) -> ChannelProfileOut:
        """
        Channel card with subscriber counts and the viewer's subscription flag.

        :param username: Channel handle (case-insensitive).
        :param viewer_id: Requesting user, used for ``is_subscribed``.
        :raises ValidationError: Blank username.
        :raises NotFoundError: No such channel.
        """
        if not username or not username.strip():
            raise ValidationError("Username is missing")

        with self.ro_uow() as uow:
            repo: ProfileRepository = uow.profiles
            row = repo.channel_profile(username, viewer_id=viewer_id)

        if row is None:
            raise NotFoundError("Channel", username.strip().lower())

        return ChannelProfileOut(
            id=row.id,
            fullname=row.fullname,
            username=row.username,
            email=row.email,
            avatar=row.avatar,
            cover_image=row.cover_image or "",
            subscribers_count=int(row.subscribers_count or 0),
            channels_subscribed_to_count=int(row.channels_subscribed_to_count or 0),
            is_subscribed=bool(row.is_subscribed),
        )

    def watch_history(self, user_id: int) -> list[WatchHistoryItemOut]:
        """
        The user's watched videos in watch order.

        :raises NotFoundError: The user row is absent.
        """
        with self.ro_uow() as uow:
            repo: ProfileRepository = uow.profiles
            if not repo.user_exists(user_id):
                raise NotFoundError("User", user_id)
            items = [
                WatchHistoryItemOut(
                    id=row.Video.id,
                    title=row.Video.title,
                    description=row.Video.description,
                    video_url=row.Video.video_url,
                    thumbnail_url=row.Video.thumbnail_url,
                    duration=float(row.Video.duration),
                    views=int(row.Video.views),
                    is_published=bool(row.Video.is_published),
                    created_at=row.Video.created_at,
                    watched_at=row.watched_at,
                    owner=OwnerOut(
                        id=row.owner_id,
                        username=row.owner_username,
                        fullname=row.owner_fullname,
                        avatar=row.owner_avatar,
                    ),
                )
                for row in repo.watch_history(user_id)
            ]

        logger.debug("profile.watch_history", extra={"user_id": user_id})
        return items
