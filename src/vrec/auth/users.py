# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""User credential store.

Accounts are append-only: there is no delete operation.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vrec.auth.passwords import hash_password, verify_password
from vrec.errors import Conflict, NotFound, ValidationError
from vrec.models import Role, User

logger = logging.getLogger(__name__)


def _clean_email(email: str) -> str:
    e = (email or "").strip()
    if not e or "@" not in e:
        raise ValidationError("A valid email is required")
    return e


def _commit_unique(db: Session) -> None:
    # The pre-check in callers is not atomic; the unique index settles races.
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists")


def find_by_email(db: Session, email: str) -> Optional[User]:
    e = (email or "").strip()
    if not e:
        return None
    return db.scalar(select(User).where(User.email == e))


def find_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def list_users(db: Session) -> List[User]:
    return list(db.scalars(select(User).order_by(User.created_at.desc(), User.id.desc())))


def create_user(db: Session, email: str, raw_password: str, role: Role = Role.STANDARD) -> User:
    e = _clean_email(email)
    if not raw_password:
        raise ValidationError("Password is required")
    if find_by_email(db, e) is not None:
        raise Conflict("User already exists")

    user = User(email=e, password_hash=hash_password(raw_password), role=Role(role))
    db.add(user)
    _commit_unique(db)
    db.refresh(user)
    logger.info("Created user", extra={"user_id": user.id, "role": user.role.value})
    return user


def update_user(
    db: Session,
    user_id: int,
    *,
    email: Optional[str] = None,
    raw_password: Optional[str] = None,
    role: Optional[Role] = None,
) -> User:
    """Apply a partial update. Empty values mean "leave unchanged"."""
    user = find_by_id(db, user_id)
    if user is None:
        raise NotFound("User not found")

    if email:
        e = _clean_email(email)
        if e != user.email:
            other = find_by_email(db, e)
            if other is not None and other.id != user.id:
                raise Conflict("Email already in use")
            user.email = e
    if role is not None:
        user.role = Role(role)
    if raw_password:
        user.password_hash = hash_password(raw_password)

    _commit_unique(db)
    db.refresh(user)
    logger.info("Updated user", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, raw_password: str) -> Optional[User]:
    u = find_by_email(db, email)
    if not u:
        return None
    if not verify_password(u.password_hash, raw_password):
        return None
    return u
