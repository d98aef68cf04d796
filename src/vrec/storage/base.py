# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Storage contract shared by the local and remote backends."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Protocol

from vrec.errors import ValidationError

MAX_BLOB_BYTES = 50 * 1024 * 1024

# webm, wav, mp3, mpeg, ogg, m4a
ALLOWED_AUDIO_TYPES = frozenset(
    {
        "audio/webm",
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
        "audio/mp3",
        "audio/mpeg",
        "audio/ogg",
        "audio/mp4",
        "audio/x-m4a",
        "audio/m4a",
    }
)

_EXT_BY_TYPE = {
    "audio/webm": ".webm",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/mp3": ".mp3",
    "audio/mpeg": ".mp3",
    "audio/ogg": ".ogg",
    "audio/mp4": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/m4a": ".m4a",
}


@dataclass(frozen=True)
class BlobMeta:
    original_name: str
    content_type: str
    size: int


@dataclass(frozen=True)
class StorageReference:
    """Where a stored blob lives. Exactly one shape is populated."""

    filename: str
    local_path: Optional[str] = None
    remote_url: Optional[str] = None
    remote_id: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        return bool(self.remote_id)


class StorageBackend(Protocol):
    name: str
    max_bytes: int

    def store(self, data: bytes, meta: BlobMeta) -> StorageReference:
        """Persist the blob and return a reference to it."""
        ...

    def delete(self, reference: StorageReference) -> None:
        """Remove the blob. Raises StorageError on provider failure."""
        ...


def normalize_content_type(content_type: Optional[str]) -> str:
    """'audio/webm;codecs=opus' -> 'audio/webm'"""
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_blob(meta: BlobMeta, *, max_bytes: int = MAX_BLOB_BYTES) -> None:
    ctype = normalize_content_type(meta.content_type)
    if ctype not in ALLOWED_AUDIO_TYPES:
        raise ValidationError("Invalid file type. Only audio files are allowed.")
    if meta.size <= 0:
        raise ValidationError("Uploaded file is empty")
    if meta.size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise ValidationError(f"File too large. Maximum size is {limit_mb} MB.")


def generate_filename(original_name: str, content_type: str = "") -> str:
    """Collision-resistant name: recording-<epoch ms>-<random><ext>."""
    ext = PurePosixPath((original_name or "").replace("\\", "/")).suffix.lower()
    if len(ext) < 2 or len(ext) > 10 or not ext[1:].isalnum():
        ext = _EXT_BY_TYPE.get(normalize_content_type(content_type), "")
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"recording-{suffix}{ext}"
