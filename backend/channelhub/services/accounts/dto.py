"""
DTOs for AccountService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models and
from the web framework: uploads arrive as :class:`UploadIn`, not as werkzeug
objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UploadIn:
    """
    A file handed over by the delivery layer.

    :param stream: Readable binary stream positioned at the start.
    :type stream: BinaryIO
    :param filename: Client-supplied filename (only the extension is kept).
    :type filename: str
    :param content_type: Declared MIME type, if any.
    :type content_type: str | None
    """

    stream: BinaryIO
    filename: str
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for account registration.

    :param fullname: Display name.
    :type fullname: str
    :param username: Channel handle (stored lowercase).
    :type username: str
    :param email: Login email (stored lowercase).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param avatar: Required avatar image.
    :type avatar: UploadIn | None
    :param cover_image: Optional cover image.
    :type cover_image: UploadIn | None
    """

    fullname: str
    username: str
    email: str
    password: str
    avatar: UploadIn | None = None
    cover_image: UploadIn | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. Either ``username`` or ``email`` must be given.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Channel handle.
    :type username: str | None
    :param email: Login email.
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param user_id: User identifier.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    user_id: int
    old_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class AccountUpdateIn:
    """
    Input DTO for profile updates. ``None`` means "leave unchanged".

    :param fullname: Optional new display name.
    :type fullname: str | None
    :param email: Optional new email.
    :type email: str | None
    """

    fullname: str | None = None
    email: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Sanitized user projection; never carries the password hash or tokens.
    """

    id: int
    username: str
    email: str
    fullname: str
    avatar: str
    cover_image: str
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Result of a successful login.

    :param user: Sanitized user.
    :type user: UserPublicOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str
