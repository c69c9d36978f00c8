"""Factory Boy helpers wired to the Flask-scoped SQLAlchemy session."""

from __future__ import annotations

import factory

from channelhub.core.extensions import db


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting through ``db.session`` and committing each object.

    Services open their own units of work on the same scoped session, so
    factory rows must be committed to be visible and to survive their
    rollbacks.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = lambda: db.session  # noqa: E731
        sqlalchemy_session_persistence = "commit"
