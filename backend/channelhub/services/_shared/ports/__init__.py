"""
channelhub.services._shared.ports
=================================

Collection of *ports* (hexagonal interfaces) that the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, an abstraction for signing and decoding
    access and refresh JWTs.

- :mod:`object_storage`:
    Defines :class:`~.ObjectStorage`, an abstraction for storing uploaded media
    and returning a public URL.

Design Notes
------------
Concrete adapters live under ``channelhub.infra``.
"""

from __future__ import annotations

from .object_storage import ObjectStorage, StoredObject
from .token_provider import TokenProvider

__all__ = [
    "TokenProvider",
    "ObjectStorage",
    "StoredObject",
]
