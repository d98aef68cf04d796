# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

DEFAULT_SALT = "vrec.session.v1"
DEFAULT_MAX_AGE_SECONDS = 86400  # 24 hours


class InvalidToken(Exception):
    pass


class TokenExpired(InvalidToken):
    pass


def _serializer(secret: str, salt: str) -> URLSafeTimedSerializer:
    if not secret:
        raise RuntimeError("Missing session secret key")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


def issue_token(user_id: int, *, secret: str, salt: str = DEFAULT_SALT) -> str:
    """Sign the user id into a timestamped token."""
    return _serializer(secret, salt).dumps({"uid": int(user_id)})


def verify_token(
    token: str,
    *,
    secret: str,
    salt: str = DEFAULT_SALT,
    max_age: int = DEFAULT_MAX_AGE_SECONDS,
) -> int:
    """Return the user id bound to ``token``.

    Raises TokenExpired when the token is older than ``max_age`` seconds and
    InvalidToken for anything else that does not check out.
    """
    if not token:
        raise InvalidToken("Empty token")
    s = _serializer(secret, salt)
    try:
        data = s.loads(token, max_age=max_age)
    except SignatureExpired as e:
        raise TokenExpired(str(e))
    except BadSignature as e:
        raise InvalidToken(str(e))

    uid = (data or {}).get("uid") if isinstance(data, dict) else None
    if isinstance(uid, bool) or not isinstance(uid, int) or uid <= 0:
        raise InvalidToken("Malformed token payload")
    return uid
