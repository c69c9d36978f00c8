"""HTTP surface: the versioned JSON API plus the media file route."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount ``(blueprint, relative_prefix)`` pairs below ``base_prefix``.

    ``("/api/v1", [(users_bp, "/users")])`` mounts ``users_bp`` at
    ``/api/v1/users``; an empty relative prefix mounts at the base itself.
    """

    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Mount API v1 under ``API_BASE_PREFIX`` and media under ``MEDIA_URL_PREFIX``."""

    from channelhub.api.media import bp as media_bp
    from channelhub.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=_join_prefix(api_base, API_VERSION), entries=REGISTRY)
    app.register_blueprint(media_bp, url_prefix=_join_prefix(app.config.get("MEDIA_URL_PREFIX", "/media")))


__all__ = ["init_app", "register_blueprint_group"]
