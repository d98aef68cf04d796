# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from pathlib import Path

from vrec.errors import StorageError
from vrec.storage.base import MAX_BLOB_BYTES, BlobMeta, StorageReference, generate_filename, validate_blob

logger = logging.getLogger(__name__)


class LocalStorageBackend:
    """Blobs on the server's filesystem, one file per upload.

    The reference is the path relative to ``base_dir``; files are served back
    under ``url_prefix`` by the app's static mount.
    """

    name = "local"

    def __init__(self, base_dir: Path, *, url_prefix: str = "/uploads", max_bytes: int = MAX_BLOB_BYTES) -> None:
        self.base_dir = Path(base_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, relative: str) -> Path:
        p = (self.base_dir / relative).resolve()
        if p != self.base_dir and self.base_dir not in p.parents:
            raise StorageError(f"Path escapes upload directory: {relative}")
        return p

    def store(self, data: bytes, meta: BlobMeta) -> StorageReference:
        validate_blob(meta, max_bytes=self.max_bytes)
        filename = generate_filename(meta.original_name, meta.content_type)
        target = self._resolve(filename)
        try:
            target.write_bytes(data)
        except OSError as e:
            logger.error("Failed to write recording", extra={"file_name": filename, "error": str(e)})
            raise StorageError(f"Local write failed: {e}")

        logger.info("Stored recording locally", extra={"file_name": filename, "size_bytes": len(data)})
        return StorageReference(filename=filename, local_path=filename)

    def delete(self, reference: StorageReference) -> None:
        if not reference.local_path:
            return
        target = self._resolve(reference.local_path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Local delete failed: {e}")
        logger.info("Deleted local recording", extra={"file_name": reference.local_path})

    def public_url(self, reference: StorageReference) -> str:
        return f"{self.url_prefix}/{reference.local_path}"
