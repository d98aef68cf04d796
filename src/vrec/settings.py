# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process configuration read from the environment.

Settings are built once per application (see ``vrec.app.create_app``) and
never re-read per request. The storage backend choice in particular is fixed
for the lifetime of the process.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

_TRUTHY = {"1", "true", "yes", "y"}


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _default_upload_dir(data_dir: Path) -> Path:
    # Serverless hosts only allow writes under /tmp.
    if os.getenv("VERCEL"):
        return Path("/tmp/uploads")
    return data_dir / "uploads"


@dataclass(frozen=True)
class Settings:
    secret_key: str
    session_salt: str = "vrec.session.v1"
    cookie_name: str = "vrec_session"
    session_max_age: int = 86400
    cookie_secure: bool = False

    data_dir: Path = Path("data")
    database_url: str = ""
    upload_dir: Path = Path("data/uploads")
    uploads_url_prefix: str = "/uploads"
    max_upload_bytes: int = 50 * 1024 * 1024

    s3_bucket: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: Optional[str] = None
    s3_region: str = "auto"
    s3_public_base_url: Optional[str] = None
    s3_folder: str = "voice-recordings"

    admin_mirror_enabled: bool = False
    cors_origins: str = "*"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        secret = _env_str("VREC_SECRET_KEY") or _env_str("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing VREC_SECRET_KEY (or SECRET_KEY) in environment")

        data_dir = Path(_env_str("VREC_DATA_DIR", "data")).resolve()
        upload_dir = Path(_env_str("VREC_UPLOAD_DIR") or str(_default_upload_dir(data_dir))).resolve()
        database_url = _env_str("VREC_DATABASE_URL") or f"sqlite:///{data_dir / 'vrec.db'}"

        return cls(
            secret_key=secret,
            session_salt=_env_str("VREC_SESSION_SALT", "vrec.session.v1"),
            cookie_name=_env_str("VREC_COOKIE_NAME", "vrec_session"),
            session_max_age=int(_env_str("VREC_SESSION_MAX_AGE", "86400")),
            cookie_secure=_env_bool("VREC_COOKIE_SECURE"),
            data_dir=data_dir,
            database_url=database_url,
            upload_dir=upload_dir,
            max_upload_bytes=int(_env_str("VREC_MAX_UPLOAD_MB", "50")) * 1024 * 1024,
            s3_bucket=_env_str("VREC_S3_BUCKET"),
            s3_access_key_id=_env_str("VREC_S3_ACCESS_KEY_ID"),
            s3_secret_access_key=_env_str("VREC_S3_SECRET_ACCESS_KEY"),
            s3_endpoint_url=_env_str("VREC_S3_ENDPOINT_URL") or None,
            s3_region=_env_str("VREC_S3_REGION", "auto"),
            s3_public_base_url=_env_str("VREC_S3_PUBLIC_BASE_URL") or None,
            s3_folder=_env_str("VREC_S3_FOLDER", "voice-recordings").strip("/"),
            admin_mirror_enabled=_env_bool("VREC_ADMIN_MIRROR_ENABLED"),
            cors_origins=_env_str("VREC_CORS_ORIGINS", "*"),
            log_level=_env_str("VREC_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def remote_storage_configured(self) -> bool:
        """True when all three object-storage credentials are present."""
        return bool(self.s3_bucket and self.s3_access_key_id and self.s3_secret_access_key)

    @property
    def cors_origins_list(self) -> List[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.cookie_secure}
