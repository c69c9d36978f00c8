"""Shared plumbing for application services."""

from __future__ import annotations

from channelhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for the account, token and profile services.

    Services reach the database only through a unit of work and raise
    :class:`~channelhub.services._shared.errors.ServiceError` subclasses;
    ``channelhub.core.errors`` turns those into HTTP problems.
    """

    READ_ISOLATION = "READ COMMITTED"

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of work that commits on a clean exit and rolls back otherwise."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Unit of work for lookups; it always rolls back.

        :param enforce_db_readonly: Also issue ``SET TRANSACTION READ ONLY``
            where the dialect supports it.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=self.READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )
