"""
GeoCats Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Settings are read from the environment at import time, so the
       variables below are set before anything from ``geocats`` is imported.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_engine / db_session: in-memory SQLite with the real schema
    ├── test_client: HTTPX AsyncClient wired to db_engine
    ├── alice, bob, admin: persisted users
    ├── alice_headers, bob_headers, admin_headers: bearer headers
    ├── identity_of: builds an Identity for a persisted user
    └── sample_image_bytes: minimal JPEG for upload tests
"""

import os
import tempfile

# Override settings for testing BEFORE any geocats imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="geocats_test_")
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from geocats.auth.identity import Identity
from geocats.auth.security import create_access_token, hash_password
from geocats.database import Base, get_db_session
from geocats.models import Cat, User, UserRole


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock async session; no database needed.

    Usage:
        mock_db_session.get.return_value = cat
        await cat_service.get(mock_db_session, cat.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Schema on In-Memory SQLite
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    One in-memory database per test. StaticPool keeps the single connection
    alive so every session sees the same tables.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite leaves FK enforcement off unless asked; cascade needs it
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport, with the
    session dependency pointed at the test database.
    """
    from geocats.main import app

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Users and Tokens
# ══════════════════════════════════════════════════════════════════════════

async def _persist_user(session_factory, user_name: str, role: UserRole) -> User:
    user = User(
        user_name=user_name,
        email=f"{user_name}@example.com",
        role=role.value,
        password=hash_password(f"{user_name}-secret"),
    )
    async with session_factory() as session:
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture
async def alice(session_factory) -> User:
    return await _persist_user(session_factory, "alice", UserRole.USER)


@pytest_asyncio.fixture
async def bob(session_factory) -> User:
    return await _persist_user(session_factory, "bob", UserRole.USER)


@pytest_asyncio.fixture
async def admin(session_factory) -> User:
    return await _persist_user(session_factory, "root", UserRole.ADMIN)


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def alice_headers(alice) -> dict:
    return bearer(alice)


@pytest.fixture
def bob_headers(bob) -> dict:
    return bearer(bob)


@pytest.fixture
def admin_headers(admin) -> dict:
    return bearer(admin)


@pytest.fixture
def identity_of():
    def _identity(user: User) -> Identity:
        return Identity(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            role=UserRole(user.role),
        )
    return _identity


# ══════════════════════════════════════════════════════════════════════════
# Cats
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_cat(session_factory):
    """Persist a cat directly; ``lon``/``lat`` default to (0, 0)."""

    async def _make(owner: User, cat_name: str = "Tom", lon: float = 0.0, lat: float = 0.0) -> Cat:
        cat = Cat(
            cat_name=cat_name,
            weight=4.2,
            filename="stored.jpg",
            birthdate=date(2020, 5, 17),
            longitude=lon,
            latitude=lat,
            owner_id=owner.id,
        )
        async with session_factory() as session:
            session.add(cat)
            await session.commit()
        return cat

    return _make


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG: SOI marker + JFIF header + EOI marker. Not a real picture,
    but it passes extension and MIME checks.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)
