"""
SQLAlchemy units of work over the Flask-scoped session.

Both flavours hand out the same repositories (``users`` and ``profiles``)
bound to ``db.session``. The read-write flavour commits when the block exits
cleanly. The read-only flavour always rolls back and refuses writes while it
is open.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from channelhub.core.extensions import db
from channelhub.repositories import ProfileRepository, UserRepository
from channelhub.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# First keyword of statements the read-only unit of work refuses to run
WRITE_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "merge",
    "replace",
    "upsert",
    "create",
    "alter",
    "drop",
    "truncate",
    "grant",
    "revoke",
)


class _SessionRepositories:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)
        self.profiles = ProfileRepository(session=session)


class SQLAlchemyUnitOfWork(_SessionRepositories, UnitOfWork):
    """Read-write transaction: commit on success, roll back on any exception."""

    def __init__(self) -> None:
        super().__init__(db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on the first statement
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_SessionRepositories, UnitOfWork):
    """
    Read-only transaction over the Flask-scoped session.

    While open, a ``before_flush`` hook rejects pending ORM changes and a
    ``before_cursor_execute`` hook rejects data-changing SQL. On PostgreSQL and
    MySQL/MariaDB the transaction is additionally opened with
    ``SET TRANSACTION`` isolation and ``READ ONLY`` directives; other dialects
    (SQLite) rely on the hooks alone.

    Parameters
    ----------
    isolation_level:
        Isolation level for the directive, e.g. ``"READ COMMITTED"``.
    enforce_db_readonly:
        Issue ``SET TRANSACTION READ ONLY`` where supported.
    """

    DIRECTIVE_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._hooks: list[tuple[Any, str, Any]] = []

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # Directives only apply as the first statements of a transaction
        fresh = not self.session().in_transaction()
        self._conn = self.session.connection()
        self._install_guards(self._conn)
        if fresh and self._conn.dialect.name in self.DIRECTIVE_DIALECTS:
            self._apply_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        """
        :raises RuntimeError: Always; this unit of work never writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def _apply_directives(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.upper().strip()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("uow.readonly_directives_failed error=%s; relying on guards", exc)

    def _install_guards(self, conn: Connection) -> None:
        if self._hooks:
            return

        def block_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked (pending changes).")

        def block_writes(conn, cursor, statement, parameters, context, executemany):
            keyword = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if keyword in WRITE_KEYWORDS:
                raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

        for target, name, fn in (
            (self.session, "before_flush", block_flush),
            (conn, "before_cursor_execute", block_writes),
        ):
            event.listen(target, name, fn)
            self._hooks.append((target, name, fn))

    def _remove_guards(self) -> None:
        while self._hooks:
            target, name, fn = self._hooks.pop()
            with suppress(SQLAlchemyError):
                event.remove(target, name, fn)
