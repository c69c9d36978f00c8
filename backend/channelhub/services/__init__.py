"""Service layer public API.

Re-exports
----------
- :class:`BaseService` (from ``channelhub.services._shared.base``)
- :class:`TokenService` and :class:`TokenPairOut` (``channelhub.services.tokens``)
- :class:`AccountService` (``channelhub.services.accounts``)
- :class:`ProfileQueryService` (``channelhub.services.profiles``)
"""

from __future__ import annotations

from ._shared.base import BaseService
from .accounts.service import AccountService
from .profiles.service import ProfileQueryService
from .tokens.dto import RefreshCheck, TokenPairOut
from .tokens.service import TokenService

__all__ = [
    "BaseService",
    "AccountService",
    "ProfileQueryService",
    "RefreshCheck",
    "TokenPairOut",
    "TokenService",
]
