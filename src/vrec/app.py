# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""FastAPI application factory.

Run with ``python -m vrec`` or ``uvicorn --factory vrec.app:create_app``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from vrec import __version__
from vrec.db import init_db, make_engine, make_session_factory
from vrec.errors import AppError, PersistenceError
from vrec.routes import admin, auth, recordings, users
from vrec.settings import Settings
from vrec.storage.selector import select_storage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "method": request.method, "error": str(exc)},
                exc_info=exc,
            )
            # Server-side detail stays in the log.
            return JSONResponse(status_code=exc.status_code, content={"message": type(exc).default_message})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def _persistence_error(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Persistence failure",
            extra={"path": request.url.path, "method": request.method, "error": str(exc)},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": PersistenceError.default_message})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method, "error": str(exc)},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(settings: Optional[Settings] = None, *, s3_client: Any = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    engine = make_engine(settings.database_url)
    init_db(engine)
    storage = select_storage(settings, s3_client=s3_client)

    app = FastAPI(title="vrec", version=__version__)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(recordings.router, prefix="/api/recordings", tags=["recordings"])
    if settings.admin_mirror_enabled:
        app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
        logger.warning("Admin mirror API enabled at /api/admin (administrator session required)")

    # Local-backend blobs; remote blobs are served from the provider URL.
    app.mount(
        settings.uploads_url_prefix,
        StaticFiles(directory=str(settings.upload_dir)),
        name="uploads",
    )

    @app.get("/health")
    def health():
        return {"ok": True, "storage": storage.name}

    logger.info(
        "vrec application created",
        extra={"version": __version__, "storage": storage.name, "admin_mirror": settings.admin_mirror_enabled},
    )
    return app
