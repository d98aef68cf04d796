# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from vrec.auth.session import issue_token
from vrec.auth.users import authenticate, create_user, find_by_id
from vrec.db import get_db
from vrec.deps import get_settings
from vrec.errors import Unauthorized
from vrec.models import Role, User
from vrec.permissions import CurrentUser, require_authenticated
from vrec.schemas import Credentials, user_to_dict
from vrec.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _with_session_cookie(resp: JSONResponse, user: User, settings: Settings) -> JSONResponse:
    token = issue_token(user.id, secret=settings.secret_key, salt=settings.session_salt)
    resp.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.session_max_age,
        **settings.cookie_settings(),
    )
    return resp


@router.post("/register", status_code=201)
def register(body: Credentials, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    # Self-registration always yields a standard account.
    user = create_user(db, body.email, body.password, Role.STANDARD)
    resp = JSONResponse(
        status_code=201,
        content={"message": "User registered successfully", "user": user_to_dict(user)},
    )
    return _with_session_cookie(resp, user, settings)


@router.post("/login")
def login(body: Credentials, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    user = authenticate(db, body.email, body.password)
    if not user:
        logger.info("Failed login attempt")
        raise Unauthorized("Invalid credentials")
    resp = JSONResponse(content={"message": "Login successful", "user": user_to_dict(user)})
    return _with_session_cookie(resp, user, settings)


@router.post("/logout")
def logout(settings: Settings = Depends(get_settings)):
    resp = JSONResponse(content={"message": "Logged out successfully"})
    resp.delete_cookie(settings.cookie_name, **settings.cookie_settings())
    return resp


@router.get("/me")
def me(user: CurrentUser = Depends(require_authenticated), db: Session = Depends(get_db)):
    u = find_by_id(db, user.id)
    return {"user": user_to_dict(u)}
