"""
Puff Backend: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment variables are set before anything from `puff` is
       imported, so the settings singleton and the module-level engine pick
       up test values. API tests run against a fresh in-memory SQLite
       database per test through a get_db_session override.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for error-path unit tests
    ├── db_engine → session_factory → db_session: real in-memory database
    ├── test_client: HTTPX AsyncClient bound to the app via ASGITransport
    ├── auth_headers / other_auth_headers: two signed-up users
    └── strain_factory / session_row_factory / symptom_log_factory:
        unsaved ORM rows for the pure scoring and aggregation functions
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"  # Fast hashing in tests
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from puff.database import get_db_session, init_models
from puff.models import ConsumptionSession, Strain, SymptomLog

FIXED_NOW = datetime(2025, 3, 5, 12, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    AsyncMock standing in for AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite shared by every connection of one test (StaticPool)."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not send lifespan events, so startup (database wait,
    table creation) is skipped; tables come from db_engine instead.
    """
    from puff.main import app

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


async def _signup(client: AsyncClient, email: str, name: str) -> dict:
    response = await client.post(
        "/api/auth/signup",
        json={"email": email, "password": "hunter22", "name": name},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def auth_headers(test_client):
    return await _signup(test_client, "alex@example.com", "Alex")


@pytest_asyncio.fixture
async def other_auth_headers(test_client):
    return await _signup(test_client, "sam@example.com", "Sam")


# ══════════════════════════════════════════════════════════════════════════
# Unsaved ORM Rows
# ══════════════════════════════════════════════════════════════════════════
# Column defaults only apply on INSERT, so every field the code reads is set.

@pytest.fixture
def strain_factory():
    def make(**overrides) -> Strain:
        fields = {
            "id": uuid.uuid4(),
            "user_id": uuid.uuid4(),
            "name": "Blue Dream",
            "type": "hybrid",
            "rating": 3,
            "effects": [],
            "favorite": False,
            "would_buy_again": False,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Strain(**fields)
    return make


@pytest.fixture
def session_row_factory():
    def make(**overrides) -> ConsumptionSession:
        fields = {
            "id": uuid.uuid4(),
            "user_id": uuid.uuid4(),
            "strain_id": None,
            "strain_name": "Blue Dream",
            "method": "smoke",
            "mood_before": 3,
            "mood_after": None,
            "effects": [],
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return ConsumptionSession(**fields)
    return make


@pytest.fixture
def symptom_log_factory():
    def make(**overrides) -> SymptomLog:
        fields = {
            "id": uuid.uuid4(),
            "user_id": uuid.uuid4(),
            "symptom": "pain",
            "severity_before": 5,
            "severity_after": None,
            "strain_used": None,
            "method": None,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return SymptomLog(**fields)
    return make
