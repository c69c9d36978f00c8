"""Serve files written by the local object storage."""

from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

bp = Blueprint("media", __name__)


@bp.get("/<path:key>")
def serve_media(key: str):
    """Return a stored upload; ``send_from_directory`` rejects path traversal."""

    return send_from_directory(current_app.config["MEDIA_ROOT"], key)
