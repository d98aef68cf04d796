# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from vrec.db import get_db
from vrec.deps import get_storage
from vrec.errors import NotFound, ValidationError
from vrec.permissions import CurrentUser, ensure_owner_or_admin, require_administrator, require_authenticated
from vrec.schemas import recording_to_dict
from vrec.services import recording_service
from vrec.storage.selector import StorageSelector

router = APIRouter()


@router.post("/upload", status_code=201)
async def upload(
    audio: Optional[UploadFile] = File(None),
    duration: Optional[str] = Form(None),
    user: CurrentUser = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    if audio is None or not audio.filename:
        raise ValidationError("No file uploaded")

    # Read one byte past the limit so oversize uploads are detected without
    # buffering the whole body.
    limit = storage.active.max_bytes
    data = await audio.read(limit + 1)
    if len(data) > limit:
        raise ValidationError(f"File too large. Maximum size is {limit // (1024 * 1024)} MB.")

    # Blob write and commit are blocking; keep them off the event loop.
    rec = await run_in_threadpool(
        recording_service.upload_recording,
        db,
        storage,
        owner_id=user.id,
        data=data,
        original_name=audio.filename,
        content_type=audio.content_type or "",
        duration=duration,
    )
    return {"message": "Recording uploaded successfully", "recording": recording_to_dict(rec, storage)}


@router.get("/my-recordings")
def my_recordings(
    user: CurrentUser = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    return [recording_to_dict(r, storage) for r in recording_service.list_by_owner(db, user.id)]


@router.get("/all")
def all_recordings(
    admin: CurrentUser = Depends(require_administrator),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    return [recording_to_dict(r, storage, user_email=email) for r, email in recording_service.list_all(db)]


@router.get("/user/{user_id}")
def recordings_for_user(
    user_id: int,
    admin: CurrentUser = Depends(require_administrator),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    return [recording_to_dict(r, storage) for r in recording_service.list_by_owner(db, user_id)]


@router.get("/{recording_id}")
def get_recording(
    recording_id: int,
    user: CurrentUser = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    rec = recording_service.find_by_id(db, recording_id)
    if rec is None:
        raise NotFound("Recording not found")
    ensure_owner_or_admin(rec, user)
    return recording_to_dict(rec, storage)


@router.delete("/{recording_id}")
def delete_recording(
    recording_id: int,
    user: CurrentUser = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: StorageSelector = Depends(get_storage),
):
    recording_service.delete_owned(db, storage, recording_id, user.id)
    return {"message": "Recording deleted successfully"}
