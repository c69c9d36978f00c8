"""In-memory :class:`ObjectStorage` double for unit and API tests."""

from __future__ import annotations

import threading
from typing import BinaryIO
from uuid import uuid4

from channelhub.services._shared.ports import ObjectStorage, StoredObject


class InMemoryObjectStorage(ObjectStorage):
    """Dictionary-backed storage for unit and API tests."""

    def __init__(self, *, url_prefix: str = "memory://", fail: bool = False) -> None:
        self.url_prefix = url_prefix.rstrip("/")
        self.fail = fail
        self.objects: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def upload(
        self,
        stream: BinaryIO,
        *,
        filename: str,
        content_type: str | None = None,
        folder: str = "",
    ) -> StoredObject:
        if self.fail:
            raise OSError("storage unavailable")
        key = "/".join(p for p in (folder.strip("/"), f"{uuid4().hex}-{filename}") if p)
        with self._lock:
            self.objects[key] = stream.read()
        return StoredObject(key=key, url=f"{self.url_prefix}/{key}")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self.objects.pop(key, None) is not None
