"""User repository: credential lookups and the refresh-token slot."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, or_, select, update

from channelhub.models.user import User
from channelhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository never signs tokens; it only reads and writes the stored
    refresh-token value. Writes to that slot go through Core ``UPDATE``
    statements so they are atomic at the database level.
    """

    model = User

    def _updatable_fields(self):
        """Publicly allowed updatable fields (never password or refresh token)."""
        return {"fullname", "email", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive).

        :param username: Handle to normalise and search.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Fetch the first user matching either the username or the email.

        Blank criteria are ignored; returns ``None`` when both are blank.
        """
        clauses = []
        if username and username.strip():
            clauses.append(User.username == username.strip().lower())
        if email and email.strip():
            clauses.append(User.email == email.strip().lower())
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, *, username: str, email: str) -> bool:
        """Return ``True`` when either the username or the email is taken."""
        stmt = select(func.count(User.id)).where(
            or_(
                User.username == username.strip().lower(),
                User.email == email.strip().lower(),
            )
        )
        return bool(self.session.execute(stmt).scalar())

    def email_taken_by_other(self, email: str, *, user_id: int) -> bool:
        """Return ``True`` when ``email`` belongs to a user other than ``user_id``."""
        stmt = select(func.count(User.id)).where(
            User.email == email.strip().lower(), User.id != user_id
        )
        return bool(self.session.execute(stmt).scalar())

    # ---------------------------- Refresh-token slot ----------------------------

    def get_refresh_token(self, user_id: int) -> tuple[bool, str | None]:
        """Read the stored refresh token.

        :returns: ``(found, token)``; ``found`` is ``False`` when the user row
                  does not exist.
        """
        row = self.session.execute(
            select(User.refresh_token).where(User.id == user_id)
        ).first()
        if row is None:
            return False, None
        return True, row[0]

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Unconditionally overwrite (or clear) the slot.

        :returns: ``True`` when the user row exists.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount == 1)

    def swap_refresh_token(self, user_id: int, *, expected: str, new: str) -> bool:
        """Compare-and-swap the slot.

        A single ``UPDATE ... WHERE refresh_token = :expected`` so that of two
        concurrent rotations of the same token only one matches a row.

        :returns: ``True`` when the slot still held ``expected`` and was replaced.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount == 1)
