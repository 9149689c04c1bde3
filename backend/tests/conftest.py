"""
Termbook Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite) with the
       schema created from the ORM metadata and the reference data seeded.

Fixture Hierarchy:
    db_engine        in-memory engine, schema created
    session_factory  sessions bound to db_engine
    db_session       seeded session for service/repository tests
    add_definition   helper that inserts a definition and commits
    test_client      HTTPX AsyncClient with get_db_session overridden
    auth_headers     builds a Bearer header for a given user id

Seeded reference data:
    users:      1 alice, 2 bob, 5 eve
    categories: 1 Slang, 2 Technology, 3 Science
    statuses:   1 Pending, 2 Approved, 3 Rejected, 4 Deleted
"""

import os

# Must be set before termbook.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from termbook.database import Base, get_db_session
from termbook.models import Category, Definition, DefinitionStatus, StatusDefinition, User
from termbook.security import create_access_token

BASE_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        session.add_all([
            StatusDefinition(id=status.value, status_definition=status.label)
            for status in DefinitionStatus
        ])
        session.add_all([
            User(id=1, username="alice", email="alice@example.com"),
            User(id=2, username="bob", email="bob@example.com"),
            User(id=5, username="eve", email="eve@example.com"),
        ])
        session.add_all([
            Category(id=1, category="Slang"),
            Category(id=2, category="Technology"),
            Category(id=3, category="Science"),
        ])
        await session.commit()

    return factory


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def add_definition(session_factory):
    """
    Insert a definition and return its id.

    Usage:
        definition_id = await add_definition(term="yeet", status=DefinitionStatus.APPROVED)

    `minutes` offsets created_at/updated_at from BASE_TIME so ordering tests
    are deterministic.
    """

    async def _add(
        term: str = "yeet",
        definition: str = "To throw something with force",
        user_id: int = 1,
        category_id: int = 1,
        status: DefinitionStatus = DefinitionStatus.APPROVED,
        minutes: int = 0,
        deleted_at: Optional[datetime] = None,
    ) -> int:
        stamp = BASE_TIME + timedelta(minutes=minutes)
        async with session_factory() as session:
            row = Definition(
                term=term,
                definition=definition,
                user_id=user_id,
                category_id=category_id,
                status_definition_id=int(status),
                created_at=stamp,
                updated_at=stamp,
                deleted_at=deleted_at,
            )
            session.add(row)
            await session.commit()
            return row.id

    return _add


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for tests that only exercise service logic.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport, with
    the request session bound to the test database.
    """
    from termbook.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
