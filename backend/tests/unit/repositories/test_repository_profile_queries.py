"""Unit tests for the joined social-graph queries."""

from __future__ import annotations

from channelhub.core.extensions import db
from channelhub.repositories.profile import ProfileRepository
from tests.factories.user import UserFactory
from tests.factories.video import SubscriptionFactory, VideoFactory, WatchHistoryEntryFactory


def test_channel_profile_counts_and_flag():
    channel = UserFactory(username="chan")
    viewer = UserFactory()
    other = UserFactory()
    SubscriptionFactory(subscriber_id=viewer.id, channel_id=channel.id)
    SubscriptionFactory(subscriber_id=other.id, channel_id=channel.id)
    SubscriptionFactory(subscriber_id=channel.id, channel_id=other.id)

    repo = ProfileRepository(db.session)
    row = repo.channel_profile("CHAN", viewer_id=viewer.id)

    assert row.id == channel.id
    assert row.subscribers_count == 2
    assert row.channels_subscribed_to_count == 1
    assert bool(row.is_subscribed) is True

    not_sub = repo.channel_profile("chan", viewer_id=UserFactory().id)
    assert bool(not_sub.is_subscribed) is False


def test_channel_profile_missing_returns_none():
    assert ProfileRepository(db.session).channel_profile("ghost", viewer_id=None) is None


def test_watch_history_in_watch_order_with_owner():
    user = UserFactory()
    owner = UserFactory(username="maker")
    first = VideoFactory(owner=owner, title="First")
    second = VideoFactory(owner=owner, title="Second")
    WatchHistoryEntryFactory(user_id=user.id, video_id=second.id)
    WatchHistoryEntryFactory(user_id=user.id, video_id=first.id)
    WatchHistoryEntryFactory()  # someone else's history

    rows = ProfileRepository(db.session).watch_history(user.id)

    assert [r.Video.title for r in rows] == ["Second", "First"]
    assert {r.owner_username for r in rows} == {"maker"}
    assert rows[0].owner_id == owner.id
