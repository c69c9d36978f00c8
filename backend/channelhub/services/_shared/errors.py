"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. Every concrete error carries an :class:`ErrorKind` tag; the set of kinds
is closed, and ``channelhub/core/errors.py`` maps each kind to exactly one
HTTP status.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.

    Notes
    -----
    PostgreSQL reports the constraint name; SQLite only reports the columns
    (``UNIQUE constraint failed: users.email``), so the column suffix of the
    conventional name is matched as a fallback.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>"
    parts = constraint_name.lower().split("_", 2)
    if len(parts) == 3 and parts[0] == "uq":
        table, column = parts[1], parts[2]
        return f"{table}.{column}" in message
    return False


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by services."""

    VALIDATION = "validation_error"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    INVALID_TOKEN = "invalid_token"
    TOKEN_REVOKED = "token_revoked"
    TOKEN_STALE = "token_stale"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence_error"


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Subclasses pin ``kind`` and a default message.
    """

    kind: ClassVar[ErrorKind]
    default_message: ClassVar[str] = "Service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when a required field is missing or empty."""

    kind = ErrorKind.VALIDATION
    default_message = "All fields are required"


class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Conflict on {entity}: {detail}")


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str | int) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class UnauthenticatedError(ServiceError):
    """Raised when a request carries no usable session credential."""

    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Authentication required"


class UnauthorizedError(ServiceError):
    """Raised when presented credentials are wrong (e.g., bad password)."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidTokenError(ServiceError):
    """Raised for missing, malformed, expired or badly signed tokens."""

    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid token"


class TokenRevokedError(InvalidTokenError):
    """Raised when the user's refresh-token slot is empty (logged out)."""

    kind = ErrorKind.TOKEN_REVOKED
    default_message = "Refresh token has been revoked"


class TokenStaleError(InvalidTokenError):
    """Raised when a rotated-out refresh token is presented again."""

    kind = ErrorKind.TOKEN_STALE
    default_message = "Refresh token has already been used"


class PersistenceError(ServiceError):
    """Raised when a store write (database or object storage) fails."""

    kind = ErrorKind.PERSISTENCE
    default_message = "Persistence failure"
