#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Inkwell — FastAPI Application
=============================
Entry point.  Start with:
    uvicorn inkwell.main:app --reload

``create_app`` builds everything the request handlers need and keeps it on
``app.state``: settings, engine, session factory, file storage, notifier and
the article service.  Tests pass their own settings and session factory.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


# -----------------------------------------------------------------------------

from inkwell.core.config import Settings, get_settings
from inkwell.core.database import build_engine, build_session_factory, init_db
from inkwell.core.exceptions import InkwellError
from inkwell.core.log import configure_logging
from inkwell.routers import (
    articles, attachments, auth, comments, notifications, users, workspaces,
)
from inkwell.services.notifications import Notifier
from inkwell.services.orchestrator import ArticleService
from inkwell.services.storage import FileStorage
from inkwell.services.workspace_service import ensure_default

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    engine = None
    if session_factory is None:
        engine = build_engine(settings=settings)
        session_factory = build_session_factory(engine)

    storage = FileStorage(settings.attachment_root, settings.max_attachment_bytes)
    notifier = Notifier(settings.notifier_max_subscribers, settings.notifier_queue_size)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup / shutdown."""
        # In production, Alembic handles migrations.
        if settings.debug and engine is not None:
            await init_db(engine)
        storage.root.mkdir(parents=True, exist_ok=True)
        async with session_factory() as db, db.begin():
            await ensure_default(db, settings.default_workspace_id, settings.default_workspace_name)
        logger.info("%s %s started", settings.app_name, settings.app_version)
        yield
        notifier.close()
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Versioned articles with attachments, comments and live notifications",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.storage = storage
    app.state.notifier = notifier
    app.state.articles = ArticleService(
        session_factory, storage, notifier, retry_limit=settings.version_retry_limit
    )

    # ── Errors ────────────────────────────────────────────────────────────
    @app.exception_handler(InkwellError)
    async def inkwell_error_handler(request: Request, exc: InkwellError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # ── CORS ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────
    API = "/api"
    app.include_router(auth.router,        prefix=API)
    app.include_router(users.router,       prefix=API)
    app.include_router(workspaces.router,  prefix=API)
    app.include_router(articles.router,    prefix=API)
    app.include_router(attachments.router, prefix=API)
    app.include_router(comments.router,    prefix=API)
    app.include_router(notifications.router)

    app.mount(
        "/uploads",
        StaticFiles(directory=settings.attachment_root, check_dir=False),
        name="uploads",
    )

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/api/docs",
        }

    @app.get(f"{API}/health")
    async def health():
        return {"status": "ok"}

    return app


# -----------------------------------------------------------------------------

app = create_app()
