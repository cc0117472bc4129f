"""
Journal Board Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every storage-level test gets its own empty in-memory SQLite database,
       so ordering assertions never depend on another test's rows.
How:   aiosqlite + StaticPool keeps one connection alive for the in-memory
       database; tables come from Base.metadata.create_all().

Fixture Hierarchy (all function-scoped):
    ├── db_engine:          fresh in-memory database with all tables
    │   ├── db_session:     AsyncSession for service-level tests
    │   └── test_client:    HTTPX AsyncClient; get_db_session overridden
    ├── make_board / make_page / make_element: row factories
    ├── mock_db_session:    AsyncMock session (asserting "no query was made")
    ├── temp_storage:       temporary upload directory
    └── sample_png_bytes / sample_jpeg_bytes / sample_gif_bytes: real images
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["UPLOAD_ROOT"] = tempfile.mkdtemp(prefix="journal_board_test_")
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from io import BytesIO  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db_session  # noqa: E402
from app.models import Board, Element, Page  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    A session shared by the test body and the services it calls.

    Services only flush; nothing is committed unless the test commits.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX client bound to a fresh app whose sessions use the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import create_app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Row Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_board(db_session):
    async def _make(title="Trip journal", skin="default"):
        board = Board(
            title=title,
            description="",
            skin=skin,
            edit_token=uuid.uuid4(),
            public_token=uuid.uuid4(),
        )
        db_session.add(board)
        await db_session.flush()
        return board
    return _make


@pytest.fixture
def make_page(db_session):
    async def _make(board, order_idx, title=None, date=None):
        page = Page(
            board_id=board.id,
            title=title or f"Page {order_idx}",
            date=date or datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
            order_idx=order_idx,
        )
        db_session.add(page)
        await db_session.flush()
        return page
    return _make


@pytest.fixture
def make_element(db_session):
    async def _make(page, z, kind="sticker"):
        element = Element(
            page_id=page.id,
            kind=kind,
            x=10.0,
            y=20.0,
            w=100.0,
            h=50.0,
            z=z,
            payload={"sticker_id": "star"},
        )
        db_session.add(element)
        await db_session.flush()
        return element
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Misc Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """AsyncMock standing in for AsyncSession where a test must prove no query ran."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


def _image_bytes(fmt: str) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 120, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes():
    return _image_bytes("PNG")


@pytest.fixture
def sample_jpeg_bytes():
    return _image_bytes("JPEG")


@pytest.fixture
def sample_gif_bytes():
    return _image_bytes("GIF")
