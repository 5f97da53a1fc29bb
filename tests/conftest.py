#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Test fixtures
=============
Uses SQLite (aiosqlite) on a temporary file.  One session-scoped engine with
a single pooled connection: every session sees every committed write, and
concurrent operations queue for the connection the way they would queue for
the envelope row lock on PostgreSQL.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# ── Env vars must be set before importing app modules ────────────────────────
_TMP = Path(tempfile.mkdtemp(prefix="inkwell-tests-"))
_TEST_URL = f"sqlite+aiosqlite:///{_TMP / 'inkwell.db'}"

os.environ.setdefault("DATABASE_URL",    _TEST_URL)
os.environ.setdefault("SECRET_KEY",      "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT",     "testing")
os.environ.setdefault("ATTACHMENT_ROOT", str(_TMP / "uploads"))

from inkwell.core.config import Settings
from inkwell.core.database import Base, build_engine, build_session_factory, drop_db, init_db
from inkwell.main import create_app
from inkwell.services.notifications import Notifier
from inkwell.services.orchestrator import ArticleService
from inkwell.services.storage import FileStorage
from inkwell.services.workspace_service import ensure_default

DEFAULT_WS = "default"


# ── One engine for the whole session, one pooled connection ──────────────────
@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    eng = build_engine(_TEST_URL, pool_size=1, max_overflow=0)
    await init_db(eng)
    yield eng
    await drop_db(eng)
    await eng.dispose()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


# ── Wipe all rows before each test, then recreate the default workspace ──────
@pytest_asyncio.fixture(autouse=True)
async def clean_tables(factory: async_sessionmaker[AsyncSession]):
    async with factory() as db, db.begin():
        for table in reversed(Base.metadata.sorted_tables):
            await db.execute(table.delete())
        await ensure_default(db, DEFAULT_WS, "Default Workspace")
    yield


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=_TEST_URL,
        environment="testing",
        attachment_root=tmp_path / "uploads",
        default_workspace_id=DEFAULT_WS,
    )


@pytest.fixture
def storage(settings: Settings) -> FileStorage:
    return FileStorage(settings.attachment_root, settings.max_attachment_bytes)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(max_subscribers=5, queue_size=8)


@pytest.fixture
def service(factory, storage: FileStorage, notifier: Notifier) -> ArticleService:
    return ArticleService(factory, storage, notifier, retry_limit=5)


@pytest.fixture
def app(settings: Settings, factory):
    return create_app(settings, session_factory=factory)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c


# ── Helpers ──────────────────────────────────────────────────────────────────

class FakeUpload:
    """Minimal stand-in for fastapi.UploadFile."""

    def __init__(self, data: bytes, filename: str = "photo.png", content_type: str = "image/png"):
        self._buf = io.BytesIO(data)
        self.filename = filename
        self.content_type = content_type

    async def read(self, size: int = -1) -> bytes:
        return self._buf.read(size)


async def register_and_login(
    client: AsyncClient,
    email: str = "alice@example.com",
    password: str = "password123",
) -> str:
    """Register (or log in, if already registered) and return an access token."""
    r = await client.post("/api/auth/register", json={"email": email, "password": password})
    if r.status_code == 409:
        r = await client.post("/api/auth/login", data={"username": email, "password": password})
    assert r.status_code in (200, 201), r.text
    return r.json()["access_token"]


async def auth_headers(client: AsyncClient, email: str = "alice@example.com") -> dict:
    token = await register_and_login(client, email)
    return {"Authorization": f"Bearer {token}"}


async def create_article(
    client: AsyncClient,
    headers: dict,
    title: str = "Hello",
    content: str = "A",
    workspace_id: str = DEFAULT_WS,
) -> dict:
    r = await client.post(
        "/api/articles",
        json={"title": title, "content": content, "workspace_id": workspace_id},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


# -----------------------------------------------------------------------------
