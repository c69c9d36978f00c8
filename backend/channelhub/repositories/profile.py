"""Read-only joined queries over the social graph (channels, watch history)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, exists, func, literal, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session, aliased

from channelhub.models.subscription import Subscription
from channelhub.models.user import User
from channelhub.models.video import Video
from channelhub.models.watch_history import WatchHistoryEntry


class ProfileRepository:
    """Persistence-only projections used by the profile query service.

    Each method runs exactly one ``SELECT``; all aggregation happens in the
    database.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def channel_profile(self, username: str, *, viewer_id: int | None) -> Row[Any] | None:
        """Channel fields plus subscriber counts and the viewer's subscription flag.

        :param username: Channel handle (case-insensitive).
        :param viewer_id: Id of the requesting user, or ``None`` for anonymous.
        :returns: A row with ``User`` columns and ``subscribers_count``,
                  ``channels_subscribed_to_count``, ``is_subscribed``; ``None``
                  when the channel does not exist.
        """
        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        if viewer_id is None:
            is_subscribed: Any = literal(False)
        else:
            is_subscribed = exists().where(
                and_(
                    Subscription.channel_id == User.id,
                    Subscription.subscriber_id == viewer_id,
                )
            )

        stmt = select(
            User.id,
            User.fullname,
            User.username,
            User.email,
            User.avatar,
            User.cover_image,
            subscribers_count.label("subscribers_count"),
            subscribed_to_count.label("channels_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        ).where(User.username == username.strip().lower())
        return self.session.execute(stmt).first()

    def user_exists(self, user_id: int) -> bool:
        return bool(
            self.session.execute(select(func.count(User.id)).where(User.id == user_id)).scalar()
        )

    def watch_history(self, user_id: int) -> list[Row[Any]]:
        """Watched videos in watch order, each joined with its owner.

        :returns: Rows of ``(entry_id, watched_at, Video, owner columns...)``.
        """
        owner = aliased(User, name="owner")
        stmt = (
            select(
                WatchHistoryEntry.id.label("entry_id"),
                WatchHistoryEntry.watched_at,
                Video,
                owner.id.label("owner_id"),
                owner.username.label("owner_username"),
                owner.fullname.label("owner_fullname"),
                owner.avatar.label("owner_avatar"),
            )
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .join(owner, owner.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(WatchHistoryEntry.id.asc())
        )
        return list(self.session.execute(stmt).all())
