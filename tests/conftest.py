"""Shared pytest fixtures configured to use SQLite in-memory for unit tests."""

import asyncio
import logging
import os
from pathlib import Path

# Must be set before the app (and its settings) are imported
os.environ["PASTENOTE_SKIP_LIFESPAN_DB"] = "1"
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.pastenote.config import Settings, get_settings
from src.pastenote.core.accounting import ViewCounter, ViewCountFlusher
from src.pastenote.core.models.base import BaseModel
from src.pastenote.core.models.note import Note
from src.pastenote.database import get_db_session
from src.pastenote.main import app

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
ASSETS_DIR = Path(__file__).resolve().parents[1] / "assets"


def make_engine():
    return create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def test_settings():
    """Settings for tests: no captcha, no log files, bundled TOS."""
    return Settings(
        database_url=TEST_DB_URL,
        debug=True,
        skip_captcha=True,
        log_to_file=False,
        tos_file=str(ASSETS_DIR / "TOS.md"),
    )


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    # Avoid implicit attribute refreshes after commit (MissingGreenlet)
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def make_note(session_factory):
    """Insert a note row directly, bypassing validation."""

    async def _make(note_id="abc12345", text="hello there world", password="", views=0, **kw):
        async with session_factory() as session:
            note = Note(id=note_id, text=text, password=password, views=views, **kw)
            session.add(note)
            await session.commit()
            return note

    return _make


@pytest.fixture
def view_counter():
    return ViewCounter()


@pytest.fixture
def client(test_settings):
    """TestClient over a private in-memory database.

    Everything (tables, requests, the final flush on shutdown) runs on the
    client's own event loop.
    """
    engine = make_engine()
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    tables_ready = False

    async def _override_get_db():
        nonlocal tables_ready
        if not tables_ready:
            async with engine.begin() as conn:
                await conn.run_sync(BaseModel.metadata.create_all)
            tables_ready = True
        async with maker() as session:
            yield session

    counter = ViewCounter()
    app.state.view_counter = counter
    # long interval: tests flush explicitly
    app.state.view_flusher = ViewCountFlusher(counter, maker, interval_seconds=3600)
    app.state.ads_html = None
    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def note_payload():
    """Sample save request creating a note."""
    return {
        "id": "",
        "text": "# Groceries\n\n- milk\n- bread",
        "password": "",
        "tos": True,
        "token": "",
    }
