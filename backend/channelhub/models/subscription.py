"""Subscription model: a subscriber following a channel."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from channelhub.core.extensions import db

from .base import PKMixin, ReprMixin


class Subscription(PKMixin, ReprMixin, db.Model):
    """
    Directed edge of the social graph: ``subscriber`` follows ``channel``.

    Both ends reference :class:`~channelhub.models.user.User`. A pair is
    unique and a user cannot subscribe to themselves.
    """

    __tablename__ = "subscriptions"
    __repr_attrs__ = ("subscriber_id", "channel_id")

    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="not_self"),
        Index("ix_subscriptions_channel_id", "channel_id"),
    )
