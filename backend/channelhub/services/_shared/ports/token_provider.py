from __future__ import annotations

from typing import Any, Protocol


class TokenProvider(Protocol):
    """
    Port for issuing and decoding session JWTs.

    Access and refresh tokens are signed with distinct secrets; decoding one
    kind with the other's method MUST fail. Decoding failures of any sort
    (bad signature, expiry, malformed input, wrong ``type`` claim) raise
    :class:`~channelhub.services._shared.errors.InvalidTokenError`.
    """

    def create_access_token(self, *, identity: int | str) -> str: ...

    def create_refresh_token(self, *, identity: int | str) -> str: ...

    def decode_access(self, token: str) -> dict[str, Any]: ...

    def decode_refresh(self, token: str) -> dict[str, Any]: ...

