"""
AccountService
==============

Use cases of the account owner:
- Registration with avatar/cover upload
- Login / logout (token issuance is delegated to :class:`TokenService`)
- Password change and profile updates
- Avatar and cover image replacement
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from channelhub.repositories.user import UserRepository
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
    violates,
)
from channelhub.services._shared.ports.object_storage import ObjectStorage, StoredObject
from channelhub.services.tokens.service import TokenService

from ._converters import user_to_public
from .dto import (
    AccountUpdateIn,
    LoginIn,
    LoginOut,
    PasswordChangeIn,
    RegisterIn,
    UploadIn,
    UserPublicOut,
)

logger = logging.getLogger(__name__)

AVATAR_FOLDER = "avatars"
COVER_FOLDER = "covers"


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class AccountService(BaseService):
    """
    Application service for the account owner.

    Responsibilities
    ----------------
    - Register users ensuring username/email uniqueness.
    - Verify credentials and hand off to the token service.
    - Retrieve and update profile fields safely.
    - Manage password lifecycle and profile images.
    """

    def __init__(self, *, token_service: TokenService, storage: ObjectStorage) -> None:
        self.tokens = token_service
        self.storage = storage

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, dto: RegisterIn) -> UserPublicOut:
        """
        Register a new account.

        :param dto: Registration input.
        :returns: Sanitized user.
        :raises ValidationError: A required field is blank or the avatar is missing.
        :raises ConflictError: Username or email already taken.
        :raises PersistenceError: Upload or database write failed.
        """
        if any(_blank(v) for v in (dto.fullname, dto.username, dto.email, dto.password)):
            raise ValidationError("All fields are required")

        with self.ro_uow() as uow:
            if uow.users.exists_by_username_or_email(username=dto.username, email=dto.email):
                raise ConflictError("User", "username or email already exists")

        if dto.avatar is None:
            raise ValidationError("Avatar file is required")

        uploaded: list[StoredObject] = []
        try:
            avatar = self._upload(dto.avatar, folder=AVATAR_FOLDER)
            uploaded.append(avatar)
            cover_url = ""
            if dto.cover_image is not None:
                cover = self._upload(dto.cover_image, folder=COVER_FOLDER)
                uploaded.append(cover)
                cover_url = cover.url

            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                try:
                    user = repo.model(
                        fullname=dto.fullname,
                        username=dto.username,
                        email=dto.email,
                        password=dto.password,  # model hashes via setter
                        avatar=avatar.url,
                        cover_image=cover_url,
                    )
                    repo.add(user)
                except ValueError as exc:
                    raise ValidationError(str(exc)) from exc
                except IntegrityError as exc:
                    if violates(exc, "uq_users_email"):
                        raise ConflictError("User", "email already in use") from exc
                    if violates(exc, "uq_users_username"):
                        raise ConflictError("User", "username already in use") from exc
                    raise
                out = user_to_public(user)
        except ServiceError:
            self._discard(uploaded)
            raise
        except SQLAlchemyError as exc:
            self._discard(uploaded)
            raise PersistenceError("Could not create user") from exc

        logger.info("user.registered", extra={"user_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Session
    # --------------------------------------------------------------------- #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a token pair.

        :raises ValidationError: Neither username nor email given.
        :raises NotFoundError: No matching user.
        :raises UnauthorizedError: Wrong password.
        """
        if _blank(dto.username) and _blank(dto.email):
            raise ValidationError("Username or email is required")

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_username_or_email(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User", (dto.username or dto.email or "").strip())
            if not user.verify_password(dto.password):
                logger.warning("user.login_failed", extra={"user_id": user.id})
                raise UnauthorizedError("Invalid user credentials")
            out = user_to_public(user)

        pair = self.tokens.issue_token_pair(out.id)
        logger.info("user.login", extra={"user_id": out.id})
        return LoginOut(
            user=out,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def logout(self, user_id: int) -> None:
        """Clear the user's refresh token; previously issued refresh tokens stop working."""
        self.tokens.revoke(user_id)
        logger.info("user.logout", extra={"user_id": user_id})

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_current_user(self, user_id: int) -> UserPublicOut:
        """
        Sanitized projection of a user.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_public(user)

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Change a user's password after verifying the old one.

        The stored refresh token is left untouched.

        :raises ValidationError: New password blank, or old password wrong.
        :raises NotFoundError: When user not found.
        """
        if _blank(dto.new_password):
            raise ValidationError("New password is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not user.verify_password(dto.old_password):
                raise ValidationError("Invalid old password")
            user.password = dto.new_password  # invokes setter → hash
            repo.flush()

        logger.info("user.password_changed", extra={"user_id": dto.user_id})

    # --------------------------------------------------------------------- #
    # Profile updates
    # --------------------------------------------------------------------- #

    def update_account(self, user_id: int, dto: AccountUpdateIn) -> UserPublicOut:
        """
        Update ``fullname`` and/or ``email``.

        :raises ValidationError: Nothing to update, or a given value is blank.
        :raises ConflictError: Email already used by another account.
        :raises NotFoundError: When user not found.
        """
        updates: dict[str, Any] = {
            k: v for k, v in {"fullname": dto.fullname, "email": dto.email}.items() if v is not None
        }
        if not updates:
            raise ValidationError("At least one of fullname or email is required")
        if any(_blank(v) for v in updates.values()):
            raise ValidationError("All fields are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if "email" in updates and repo.email_taken_by_other(updates["email"], user_id=user_id):
                raise ConflictError("User", "email already in use")
            try:
                repo.assign_updates(user, updates)  # runs model validators
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                raise
            out = user_to_public(user)

        logger.info("user.updated", extra={"user_id": user_id})
        return out

    def update_avatar(self, user_id: int, file: UploadIn | None) -> UserPublicOut:
        """Upload a new avatar and store its URL."""
        if file is None:
            raise ValidationError("Avatar file is missing")
        return self._replace_image(user_id, file, field="avatar", folder=AVATAR_FOLDER)

    def update_cover_image(self, user_id: int, file: UploadIn | None) -> UserPublicOut:
        """Upload a new cover image and store its URL."""
        if file is None:
            raise ValidationError("Cover image file is missing")
        return self._replace_image(user_id, file, field="cover_image", folder=COVER_FOLDER)

    # --------------------------------------------------------------------- #
    # Utilities
    # --------------------------------------------------------------------- #

    def _replace_image(
        self, user_id: int, file: UploadIn, *, field: str, folder: str
    ) -> UserPublicOut:
        stored = self._upload(file, folder=folder)
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                repo.assign_updates(user, {field: stored.url})
                out = user_to_public(user)
        except ServiceError:
            self._discard([stored])
            raise
        except SQLAlchemyError as exc:
            self._discard([stored])
            raise PersistenceError(f"Could not update {field}") from exc

        logger.info("user.image_updated", extra={"user_id": user_id})
        return out

    def _upload(self, file: UploadIn, *, folder: str) -> StoredObject:
        try:
            stored = self.storage.upload(
                file.stream,
                filename=file.filename,
                content_type=file.content_type,
                folder=folder,
            )
        except OSError as exc:
            logger.error("storage.upload_failed", exc_info=True)
            raise PersistenceError("Error while uploading file") from exc
        if not stored.url:
            raise PersistenceError("Error while uploading file")
        return stored

    def _discard(self, stored: list[StoredObject]) -> None:
        for obj in stored:
            try:
                self.storage.delete(obj.key)
            except OSError:
                logger.warning("storage.cleanup_failed key=%s", obj.key, exc_info=True)
