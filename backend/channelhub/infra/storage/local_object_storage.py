"""Filesystem-backed object storage for uploaded media."""

from __future__ import annotations

import logging
import os
import posixpath
from typing import BinaryIO
from uuid import uuid4

from werkzeug.utils import secure_filename

from channelhub.services._shared.ports import ObjectStorage, StoredObject

log = logging.getLogger(__name__)


class LocalObjectStorage(ObjectStorage):
    """
    Store uploads under ``root`` and expose them below ``url_prefix``.

    Object keys are ``<folder>/<uuid4 hex><ext>``; the client filename only
    contributes its (sanitized) extension. Directories are created on demand.

    :param root: Base directory on disk.
    :param url_prefix: Public URL prefix (served by the ``/media`` route).
    """

    def __init__(self, *, root: str, url_prefix: str = "/media") -> None:
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, *key.split("/")))
        if os.path.commonpath([path, self.root]) != self.root:
            raise ValueError(f"Key escapes storage root: {key!r}")
        return path

    def upload(
        self,
        stream: BinaryIO,
        *,
        filename: str,
        content_type: str | None = None,
        folder: str = "",
    ) -> StoredObject:
        ext = os.path.splitext(secure_filename(filename or ""))[1].lower()
        parts = (secure_filename(p) for p in folder.split("/"))
        folder = "/".join(p for p in parts if p)
        key = posixpath.join(folder, f"{uuid4().hex}{ext}") if folder else f"{uuid4().hex}{ext}"

        path = self._path_for(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as fh:
            while chunk := stream.read(64 * 1024):
                fh.write(chunk)

        log.info("storage.uploaded key=%s content_type=%s", key, content_type)
        return StoredObject(key=key, url=f"{self.url_prefix}/{key}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        return True
