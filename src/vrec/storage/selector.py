# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Picks the active storage backend once, at startup.

Records keep whichever reference shape they were created with, so the
selector also keeps a local backend around to serve and delete local
references after the process has been switched to remote storage.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from vrec.errors import StorageError
from vrec.settings import Settings
from vrec.storage.base import BlobMeta, StorageBackend, StorageReference
from vrec.storage.local import LocalStorageBackend
from vrec.storage.remote import RemoteStorageConfig, S3StorageBackend

logger = logging.getLogger(__name__)


class StorageSelector:
    def __init__(self, local: LocalStorageBackend, remote: Optional[S3StorageBackend] = None) -> None:
        self.local = local
        self.remote = remote

    @property
    def active(self) -> StorageBackend:
        return self.remote if self.remote is not None else self.local

    @property
    def name(self) -> str:
        return self.active.name

    def store(self, data: bytes, meta: BlobMeta) -> StorageReference:
        return self.active.store(data, meta)

    def delete(self, reference: StorageReference) -> None:
        if reference.is_remote:
            if self.remote is None:
                raise StorageError("Remote storage is not configured; cannot delete remote blob")
            self.remote.delete(reference)
        else:
            self.local.delete(reference)

    def public_url(self, reference: StorageReference) -> str:
        if reference.is_remote:
            return reference.remote_url or ""
        return self.local.public_url(reference)


def remote_config_from_settings(settings: Settings) -> RemoteStorageConfig:
    return RemoteStorageConfig(
        bucket_name=settings.s3_bucket,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
        endpoint_url=settings.s3_endpoint_url,
        region=settings.s3_region,
        public_base_url=settings.s3_public_base_url,
        folder=settings.s3_folder,
    )


def select_storage(settings: Settings, *, s3_client: Any = None) -> StorageSelector:
    """Remote when all provider credentials are present, local otherwise."""
    local = LocalStorageBackend(
        settings.upload_dir,
        url_prefix=settings.uploads_url_prefix,
        max_bytes=settings.max_upload_bytes,
    )
    remote = None
    if settings.remote_storage_configured:
        remote = S3StorageBackend(
            remote_config_from_settings(settings),
            client=s3_client,
            max_bytes=settings.max_upload_bytes,
        )

    selector = StorageSelector(local, remote)
    logger.info(
        "Storage backend selected",
        extra={"backend": selector.name, "upload_dir": str(settings.upload_dir)},
    )
    return selector
