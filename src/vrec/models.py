# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vrec.db import Base
from vrec.storage.base import StorageReference


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMINISTRATOR = "admin"
    STANDARD = "user"

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMINISTRATOR


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.STANDARD,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    recordings: Mapped[List["Recording"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<User at {hex(id(self))}>"
        return f"<User(id={self.id}, email={self.email!r}, role={self.role.value})>"


class Recording(Base):
    __tablename__ = "recordings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    local_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    remote_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    remote_id: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True, nullable=False
    )

    owner: Mapped[User] = relationship(back_populates="recordings")

    @property
    def storage_reference(self) -> StorageReference:
        return StorageReference(
            filename=self.filename,
            local_path=self.local_path,
            remote_url=self.remote_url,
            remote_id=self.remote_id,
        )

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<Recording at {hex(id(self))}>"
        return f"<Recording(id={self.id}, user_id={self.user_id}, filename={self.filename!r})>"
