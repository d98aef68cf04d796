# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vrec.errors import Forbidden, NotFound, PersistenceError, StorageError, ValidationError
from vrec.models import Recording, User
from vrec.storage.base import BlobMeta, StorageReference
from vrec.storage.selector import StorageSelector

logger = logging.getLogger(__name__)


def parse_duration(raw: Union[str, float, int, None]) -> float:
    """Client-reported duration in seconds. Missing or blank means 0."""
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Duration must be a number of seconds")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise ValidationError("Duration must be a non-negative number of seconds")
    return value


def create_recording(
    db: Session,
    owner_id: int,
    meta: BlobMeta,
    reference: StorageReference,
    duration: float,
) -> Recording:
    rec = Recording(
        user_id=owner_id,
        filename=reference.filename,
        original_name=meta.original_name,
        local_path=None if reference.is_remote else reference.local_path,
        remote_url=reference.remote_url if reference.is_remote else None,
        remote_id=reference.remote_id if reference.is_remote else None,
        size=meta.size,
        duration=duration,
    )
    db.add(rec)
    db.commit()
    db.refresh(rec)
    return rec


def upload_recording(
    db: Session,
    storage: StorageSelector,
    *,
    owner_id: int,
    data: bytes,
    original_name: str,
    content_type: str,
    duration: Union[str, float, None] = None,
) -> Recording:
    """Validate, store the blob, then register it for ``owner_id``."""
    seconds = parse_duration(duration)
    meta = BlobMeta(
        original_name=(original_name or "recording").strip() or "recording",
        content_type=content_type or "",
        size=len(data),
    )
    reference = storage.store(data, meta)

    try:
        rec = create_recording(db, owner_id, meta, reference, seconds)
    except SQLAlchemyError as e:
        db.rollback()
        try:
            storage.delete(reference)
        except StorageError as cleanup_err:
            logger.warning(
                "Could not remove blob after failed insert",
                extra={"file_name": reference.filename, "error": str(cleanup_err)},
            )
        raise PersistenceError("Could not save recording") from e

    logger.info(
        "Recording uploaded",
        extra={"recording_id": rec.id, "user_id": owner_id, "backend": storage.name, "size_bytes": meta.size},
    )
    return rec


def find_by_id(db: Session, recording_id: int) -> Optional[Recording]:
    return db.get(Recording, recording_id)


def list_by_owner(db: Session, owner_id: int) -> List[Recording]:
    """Recordings owned by ``owner_id``, newest first."""
    stmt = (
        select(Recording)
        .where(Recording.user_id == owner_id)
        .order_by(Recording.created_at.desc(), Recording.id.desc())
    )
    return list(db.scalars(stmt))


def list_all(db: Session) -> List[Tuple[Recording, str]]:
    """Every recording with its owner's email, newest first."""
    stmt = (
        select(Recording, User.email)
        .join(User, Recording.user_id == User.id)
        .order_by(Recording.created_at.desc(), Recording.id.desc())
    )
    return [(rec, email) for rec, email in db.execute(stmt)]


def delete_owned(db: Session, storage: StorageSelector, recording_id: int, requester_id: int) -> None:
    """Delete a recording on behalf of its owner.

    Blob cleanup runs first and its failure is only logged; the metadata row
    is removed regardless. The two steps are not transactional.
    """
    rec = find_by_id(db, recording_id)
    if rec is None:
        raise NotFound("Recording not found")
    if rec.user_id != requester_id:
        raise Forbidden("Not allowed to delete this recording")

    try:
        storage.delete(rec.storage_reference)
    except StorageError as e:
        logger.warning(
            "Blob cleanup failed, deleting metadata anyway",
            extra={"recording_id": rec.id, "error": str(e)},
        )

    db.delete(rec)
    db.commit()
    logger.info("Recording deleted", extra={"recording_id": recording_id, "user_id": requester_id})
