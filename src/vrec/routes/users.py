# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Administrator user management. There is deliberately no delete route."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vrec.auth.users import create_user, find_by_id, list_users, update_user
from vrec.db import get_db
from vrec.errors import NotFound
from vrec.permissions import CurrentUser, require_administrator
from vrec.schemas import UserCreate, UserUpdate, user_to_dict

router = APIRouter()


@router.get("")
def get_users(db: Session = Depends(get_db), admin: CurrentUser = Depends(require_administrator)):
    return [user_to_dict(u) for u in list_users(db)]


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db), admin: CurrentUser = Depends(require_administrator)):
    u = find_by_id(db, user_id)
    if not u:
        raise NotFound("User not found")
    return user_to_dict(u)


@router.post("", status_code=201)
def post_user(body: UserCreate, db: Session = Depends(get_db), admin: CurrentUser = Depends(require_administrator)):
    u = create_user(db, body.email, body.password, body.resolved_role())
    return {"message": "User created successfully", "user": user_to_dict(u)}


@router.put("/{user_id}")
def put_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_administrator),
):
    u = update_user(
        db,
        user_id,
        email=body.email,
        raw_password=body.password,
        role=body.resolved_role(),
    )
    return {"message": "User updated successfully", "user": user_to_dict(u)}
