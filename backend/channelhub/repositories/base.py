"""Generic repository base for SQLAlchemy 2.x.

Repositories hold persistence only. They stage, load and flush entities on
the session they are given and never commit or roll back; services decide
transaction boundaries through a unit of work.

Writes coming from request payloads go through :meth:`assign_updates`, which
only accepts the keys a repository lists in ``_updatable_fields``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session

from channelhub.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for one mapped class.

    Subclasses set ``model`` and may override ``_updatable_fields``. An empty
    whitelist rejects every update.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared across the unit of work. Falls back to
            the Flask-scoped ``db.session`` when omitted.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _updatable_fields(self) -> set[str]:
        """Keys that :meth:`assign_updates` may write."""
        return set()

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """
        Keep ``fields`` only if every key is whitelisted.

        :raises ValueError: On any key outside ``_updatable_fields``.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """
        Load one entity by primary key.

        :raises RuntimeError: If the model has no ``id`` attribute.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{self.model.__name__} has no 'id' attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(self, instance: E, fields: Mapping[str, Any], *, flush: bool = True) -> E:
        """
        Assign whitelisted keys on ``instance``.

        ``setattr`` is used so ``@validates`` hooks on the model run.

        :param instance: Entity to mutate.
        :param fields: Public key to value mapping.
        :param flush: Flush after assignment (surfaces constraint errors early).
        :returns: The mutated instance.
        :raises ValueError: On a non-whitelisted key, or from a model validator.
        """
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance
