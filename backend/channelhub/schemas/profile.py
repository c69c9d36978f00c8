"""Channel and watch-history response schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    id = fields.Integer(required=True)
    fullname = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")


class OwnerSchema(Schema):
    id = fields.Integer(required=True)
    username = fields.String(required=True)
    fullname = fields.String(required=True)
    avatar = fields.String(required=True)


class WatchHistoryItemSchema(Schema):
    """One watched video with a nested owner projection."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    description = fields.String()
    video_url = fields.String(data_key="videoUrl")
    thumbnail_url = fields.String(data_key="thumbnailUrl")
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    watched_at = fields.DateTime(data_key="watchedAt", allow_none=True)
    owner = fields.Nested(OwnerSchema, required=True)
