"""Pytest fixtures for the ChannelHub backend.

Each test gets a freshly created schema in an in-memory SQLite database and a
fresh in-memory object storage, inside a pushed application context.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from channelhub import create_app
from channelhub.core.config import TestingConfig
from channelhub.core.extensions import OBJECT_STORAGE_KEY
from channelhub.core.extensions import db as _db
from channelhub.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from channelhub.services.accounts.service import AccountService
from channelhub.services.profiles.service import ProfileQueryService
from channelhub.services.tokens.service import TokenService
from tests.helpers.storage import InMemoryObjectStorage


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture(autouse=True)
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables before each test and drop them afterwards."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(autouse=True)
def storage(app: Flask) -> InMemoryObjectStorage:
    """Swap the object storage for an in-memory one for every test."""
    store = InMemoryObjectStorage(url_prefix="/media")
    app.extensions[OBJECT_STORAGE_KEY] = store
    return store


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def token_service() -> TokenService:
    return TokenService(token_provider=JWTTokenProvider())


@pytest.fixture()
def account_service(token_service: TokenService, storage: InMemoryObjectStorage) -> AccountService:
    return AccountService(token_service=token_service, storage=storage)


@pytest.fixture()
def profile_service() -> ProfileQueryService:
    return ProfileQueryService()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2026-01-01 12:00:00"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2026-01-01 12:00:00")

    return _factory
