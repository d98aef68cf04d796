# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""S3-compatible object storage backend.

Works against AWS S3, Cloudflare R2, MinIO and anything else that speaks the
S3 API. Objects live under a namespaced folder (``voice-recordings/`` by
default); the stored reference is the public URL plus the object key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from vrec.errors import StorageError
from vrec.storage.base import (
    MAX_BLOB_BYTES,
    BlobMeta,
    StorageReference,
    generate_filename,
    normalize_content_type,
    validate_blob,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteStorageConfig:
    bucket_name: str
    access_key_id: str
    secret_access_key: str
    endpoint_url: Optional[str] = None
    region: str = "auto"
    public_base_url: Optional[str] = None
    folder: str = "voice-recordings"

    def object_url(self, key: str) -> str:
        """Public URL for an object key."""
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        if self.region and self.region != "auto":
            return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
        return f"https://{self.bucket_name}.s3.amazonaws.com/{key}"


class S3StorageBackend:
    name = "remote"

    def __init__(self, config: RemoteStorageConfig, *, client: Any = None, max_bytes: int = MAX_BLOB_BYTES) -> None:
        self._config = config
        self.max_bytes = max_bytes

        if client is None:
            import boto3
            from botocore.config import Config

            client = boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                region_name=config.region,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        self._s3_client = client

        logger.info(
            "Initialized remote storage backend",
            extra={"bucket": config.bucket_name, "endpoint": config.endpoint_url or "aws"},
        )

    def _build_key(self, filename: str) -> str:
        folder = self._config.folder.strip("/")
        return f"{folder}/{filename}" if folder else filename

    def store(self, data: bytes, meta: BlobMeta) -> StorageReference:
        validate_blob(meta, max_bytes=self.max_bytes)
        filename = generate_filename(meta.original_name, meta.content_type)
        key = self._build_key(filename)

        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=key,
                Body=data,
                ContentType=normalize_content_type(meta.content_type),
                Metadata={"original-filename": meta.original_name.encode("ascii", "replace").decode("ascii")},
            )
        except Exception as e:
            logger.error("Failed to upload recording", extra={"key": key, "error": str(e)})
            raise StorageError(f"Upload failed: {e}")

        logger.info("Uploaded recording", extra={"key": key, "size_bytes": len(data)})
        return StorageReference(filename=filename, remote_url=self._config.object_url(key), remote_id=key)

    def delete(self, reference: StorageReference) -> None:
        if not reference.remote_id:
            return
        try:
            self._s3_client.delete_object(Bucket=self._config.bucket_name, Key=reference.remote_id)
        except Exception as e:
            logger.error("Failed to delete recording", extra={"key": reference.remote_id, "error": str(e)})
            raise StorageError(f"Delete failed: {e}")
        logger.info("Deleted remote recording", extra={"key": reference.remote_id})

    def public_url(self, reference: StorageReference) -> str:
        return reference.remote_url or self._config.object_url(reference.remote_id or "")
