from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


class RefreshCheck(Enum):
    """Outcome of comparing a presented refresh token with the stored slot."""

    MATCH = auto()
    EMPTY = auto()  # slot cleared (logout) or user gone
    MISMATCH = auto()  # slot holds a newer token
