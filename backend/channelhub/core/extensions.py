"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from channelhub.services._shared.ports.object_storage import ObjectStorage

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

OBJECT_STORAGE_KEY = "object_storage"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and object storage.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`channelhub.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    A pre-registered ``app.extensions["object_storage"]`` is kept as is, which
    lets tests or deployments plug another adapter in before the factory runs.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from channelhub import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    if OBJECT_STORAGE_KEY not in app.extensions:
        from channelhub.infra.storage.local_object_storage import LocalObjectStorage

        app.extensions[OBJECT_STORAGE_KEY] = LocalObjectStorage(
            root=app.config["MEDIA_ROOT"],
            url_prefix=app.config.get("MEDIA_URL_PREFIX", "/media"),
        )


def get_object_storage() -> ObjectStorage:
    """Return the object storage adapter bound to the current app."""
    storage = current_app.extensions.get(OBJECT_STORAGE_KEY)
    if storage is None:
        raise RuntimeError("Object storage is not initialized. Call init_app() first.")
    return storage
