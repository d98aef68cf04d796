# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vrec.auth.session import InvalidToken, TokenExpired, verify_token
from vrec.auth.users import find_by_id
from vrec.db import get_db
from vrec.deps import get_settings
from vrec.errors import Forbidden, Unauthorized
from vrec.models import Recording, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin


def load_user_from_request(request: Request, db: Session) -> CurrentUser:
    settings = get_settings(request)
    token = request.cookies.get(settings.cookie_name, "")
    if not token:
        raise Unauthorized("Not authenticated")
    try:
        uid = verify_token(
            token,
            secret=settings.secret_key,
            salt=settings.session_salt,
            max_age=settings.session_max_age,
        )
    except TokenExpired:
        raise Unauthorized("Session expired")
    except InvalidToken:
        raise Unauthorized("Invalid session")

    u = find_by_id(db, uid)
    if not u:
        logger.warning("Session for unknown user", extra={"user_id": uid})
        raise Unauthorized("Invalid session")
    return CurrentUser(id=u.id, email=u.email, role=u.role)


def require_authenticated(request: Request, db: Session = Depends(get_db)) -> CurrentUser:
    u = load_user_from_request(request, db)
    request.state.user = u
    return u


def require_administrator(user: CurrentUser = Depends(require_authenticated)) -> CurrentUser:
    if not user.is_admin:
        raise Forbidden("Admin access required")
    return user


def ensure_owner_or_admin(recording: Recording, user: CurrentUser) -> None:
    if recording.user_id != user.id and not user.is_admin:
        raise Forbidden("Not allowed to view this recording")
