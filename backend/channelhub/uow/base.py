"""Unit of Work contract shared by the account and profile services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from channelhub.repositories import ProfileRepository, UserRepository


class UnitOfWork(ABC):
    """
    One transaction, with every repository bound to the same session.

    ``users`` covers credentials and the refresh-token slot; ``profiles``
    covers the read-only channel and watch-history joins.
    """

    users: UserRepository
    profiles: ProfileRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
