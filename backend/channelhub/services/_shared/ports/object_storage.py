"""Port for the media store backing avatars and cover images."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Protocol


@dataclass(frozen=True, slots=True)
class StoredObject:
    """
    Result of a successful upload.

    :ivar key: Storage-relative identifier of the object.
    :ivar url: Public URL under which the object is reachable.
    """

    key: str
    url: str


class ObjectStorage(Protocol):
    """
    Abstraction over the media store used for avatars and cover images.

    Implementations raise ``OSError`` (or a subclass) when the write fails;
    the service layer converts it into a persistence error.
    """

    def upload(
        self,
        stream: BinaryIO,
        *,
        filename: str,
        content_type: str | None = None,
        folder: str = "",
    ) -> StoredObject: ...

    def delete(self, key: str) -> bool: ...
