# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Admin dashboard mirror of the user and recording listings.

The dashboard client calls these paths instead of ``/api/users`` and
``/api/recordings``. They are only mounted when VREC_ADMIN_MIRROR_ENABLED is
set, and every route still requires an administrator session.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from vrec.permissions import require_administrator
from vrec.routes import recordings, users

router = APIRouter(dependencies=[Depends(require_administrator)])

router.add_api_route("/users", users.get_users, methods=["GET"])
router.add_api_route("/users/{user_id}", users.get_user, methods=["GET"])
router.add_api_route("/users", users.post_user, methods=["POST"], status_code=201)
router.add_api_route("/users/{user_id}", users.put_user, methods=["PUT"])
router.add_api_route("/recordings", recordings.all_recordings, methods=["GET"])
router.add_api_route("/recordings/user/{user_id}", recordings.recordings_for_user, methods=["GET"])
