# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Domain errors.

Services and permission checks raise these; ``vrec.app`` turns them into
``{"message": ...}`` JSON responses with the matching status code.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    # Registration contract reports duplicates as 400.
    status_code = 400
    default_message = "User already exists"


class StorageError(AppError):
    """Raised when a storage backend operation fails."""

    status_code = 500
    default_message = "Storage error"


class PersistenceError(AppError):
    status_code = 500
    default_message = "Server error"
