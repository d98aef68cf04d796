# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request bodies and JSON shapes for users and recordings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

from vrec.models import Recording, Role, User
from vrec.storage.selector import StorageSelector


class Credentials(BaseModel):
    email: str
    password: str


class UserCreate(BaseModel):
    email: str
    password: str
    role: Optional[Role] = None
    is_admin: Optional[bool] = None

    def resolved_role(self) -> Role:
        if self.role is not None:
            return self.role
        return Role.ADMINISTRATOR if self.is_admin else Role.STANDARD


class UserUpdate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    is_admin: Optional[bool] = None

    def resolved_role(self) -> Optional[Role]:
        if self.role is not None:
            return self.role
        if self.is_admin is None:
            return None
        return Role.ADMINISTRATOR if self.is_admin else Role.STANDARD


def _iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    # SQLite drops the offset; stored values are always UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def user_to_dict(u: User) -> Dict[str, Any]:
    return {
        "id": u.id,
        "email": u.email,
        "role": u.role.value,
        "is_admin": u.role.is_admin,
        "created_at": _iso(u.created_at),
    }


def recording_to_dict(rec: Recording, storage: StorageSelector, *, user_email: Optional[str] = None) -> Dict[str, Any]:
    ref = rec.storage_reference
    out = {
        "id": rec.id,
        "user_id": rec.user_id,
        "filename": rec.filename,
        "original_name": rec.original_name,
        "local_path": rec.local_path,
        "remote_url": rec.remote_url,
        "remote_id": rec.remote_id,
        "size": rec.size,
        "duration": rec.duration,
        "created_at": _iso(rec.created_at),
        "storage": "remote" if ref.is_remote else "local",
        "url": storage.public_url(ref),
    }
    if user_email is not None:
        out["user_email"] = user_email
    return out
