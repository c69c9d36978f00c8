from __future__ import annotations

import hmac
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from channelhub.repositories.user import UserRepository
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    TokenRevokedError,
    TokenStaleError,
)
from channelhub.services._shared.ports.token_provider import TokenProvider
from channelhub.services.tokens.dto import RefreshCheck, TokenPairOut

logger = logging.getLogger(__name__)


class TokenService(BaseService):
    """
    Session token lifecycle: issuance, verification and refresh rotation.

    Each user holds at most one valid refresh token, stored on the user row.
    Issuing a pair overwrites that slot, so the previous refresh token stops
    working. Rotation replaces the slot only if it still holds the presented
    token; a concurrent loser gets :class:`TokenStaleError`.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        """
        :param token_provider: Adapter for signing/decoding JWTs.
        """
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_token_pair(
        self, user_id: int, *, expected_refresh: str | None = None
    ) -> TokenPairOut:
        """
        Sign a fresh pair and store the refresh token in the user's slot.

        Sign, then store, then return: if the store write fails nothing is
        handed out.

        :param user_id: Subject of both tokens.
        :param expected_refresh: When given, the slot is only replaced if it
            still holds this value (rotation mode).
        :returns: The new token pair.
        :raises NotFoundError: If the user row does not exist.
        :raises TokenStaleError: In rotation mode, if the slot changed meanwhile.
        :raises PersistenceError: If the database write fails.
        """
        access = self.tokens.create_access_token(identity=user_id)
        refresh = self.tokens.create_refresh_token(identity=user_id)

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if expected_refresh is None:
                    if not repo.set_refresh_token(user_id, refresh):
                        raise NotFoundError("User", user_id)
                elif not repo.swap_refresh_token(
                    user_id, expected=expected_refresh, new=refresh
                ):
                    raise TokenStaleError()
        except SQLAlchemyError as exc:
            logger.error(
                "token.store_failed", exc_info=True, extra={"user_id": user_id}
            )
            raise PersistenceError("Could not persist refresh token") from exc

        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_access(self, token: str) -> int:
        """
        Verify signature, expiry and type of an access token.

        :returns: The user id carried in ``sub``.
        :raises InvalidTokenError: On any failure.
        """
        claims = self.tokens.decode_access(token)
        return self._coerce_user_id(claims)

    def check_refresh(self, user_id: int, presented: str) -> RefreshCheck:
        """
        Compare ``presented`` with the user's stored refresh token.

        :returns: ``MATCH``, ``EMPTY`` (no stored token or no user) or ``MISMATCH``.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            found, stored = repo.get_refresh_token(user_id)
        if not found or not stored:
            return RefreshCheck.EMPTY
        if not hmac.compare_digest(stored.encode(), presented.encode()):
            return RefreshCheck.MISMATCH
        return RefreshCheck.MATCH

    def verify_and_rotate_refresh(self, token: str) -> TokenPairOut:
        """
        Validate a refresh token against the stored slot and rotate it.

        :param token: Encoded refresh JWT presented by the client.
        :returns: A new token pair; the presented token is no longer valid.
        :raises InvalidTokenError: Bad signature, expiry or type.
        :raises TokenRevokedError: The slot is empty (logged out) or user gone.
        :raises TokenStaleError: The slot holds another token, or a concurrent
            rotation won the race.
        """
        claims = self.tokens.decode_refresh(token)
        user_id = self._coerce_user_id(claims)

        check = self.check_refresh(user_id, token)
        if check is RefreshCheck.EMPTY:
            logger.warning("token.refresh_revoked", extra={"user_id": user_id})
            raise TokenRevokedError()
        if check is RefreshCheck.MISMATCH:
            logger.warning("token.refresh_reuse_detected", extra={"user_id": user_id})
            raise TokenStaleError()

        try:
            pair = self.issue_token_pair(user_id, expected_refresh=token)
        except TokenStaleError:
            logger.warning(
                "token.refresh_reuse_detected",
                extra={"user_id": user_id, "kind": "concurrent_rotation"},
            )
            raise
        except NotFoundError as exc:
            # Row vanished between check and swap
            raise TokenRevokedError() from exc

        logger.info("token.rotated", extra={"user_id": user_id})
        return pair

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def revoke(self, user_id: int) -> None:
        """
        Clear the user's refresh-token slot. Idempotent.

        :raises PersistenceError: If the database write fails.
        """
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                repo.set_refresh_token(user_id, None)
        except SQLAlchemyError as exc:
            raise PersistenceError("Could not clear refresh token") from exc
        logger.info("token.revoked", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _coerce_user_id(claims: dict[str, Any]) -> int:
        """Ensure the JWT subject can be treated as an integer user id."""
        subject = claims.get("sub")
        if isinstance(subject, int):
            return subject
        if isinstance(subject, str) and subject.isdigit():
            return int(subject)
        raise InvalidTokenError("Invalid token subject")
