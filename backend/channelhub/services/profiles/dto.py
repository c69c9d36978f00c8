"""Read models returned by :class:`ProfileQueryService`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public channel card.

    :param subscribers_count: Users subscribed to this channel.
    :type subscribers_count: int
    :param channels_subscribed_to_count: Channels this user subscribes to.
    :type channels_subscribed_to_count: int
    :param is_subscribed: Whether the viewer subscribes to this channel.
    :type is_subscribed: bool
    """

    id: int
    fullname: str
    username: str
    email: str
    avatar: str
    cover_image: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


@dataclass(frozen=True, slots=True)
class OwnerOut:
    id: int
    username: str
    fullname: str
    avatar: str


@dataclass(frozen=True, slots=True)
class WatchHistoryItemOut:
    """
    One watched video with its owner projection.

    :param watched_at: When the entry was recorded.
    :type watched_at: datetime | None
    :param owner: Uploading channel.
    :type owner: OwnerOut
    """

    id: int
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime | None
    watched_at: datetime | None
    owner: OwnerOut
