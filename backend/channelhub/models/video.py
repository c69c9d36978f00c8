"""Video model: uploads owned by a channel (user)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channelhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Video(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A published (or draft) video.

    Fields
    ------
    owner_id : int
        FK to the uploading user.
    video_url / thumbnail_url : str
        Object-storage URLs.
    duration : float
        Length in seconds.
    views : int
        View counter.
    is_published : bool
        Visibility flag.
    """

    __tablename__ = "videos"
    __repr_attrs__ = ("title",)

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    video_url: Mapped[str] = mapped_column(String(512), nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(String(512), nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    owner: Mapped[User] = relationship(back_populates="videos")

    __table_args__ = (Index("ix_videos_owner_id", "owner_id"),)
