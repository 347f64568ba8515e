"""
NoteForge Backend: Test Configuration (conftest.py)
===================================================

Shared pytest fixtures for the test suite.

Fixtures:
    mock_db_session:  AsyncMock session for service unit tests
    db_engine:        fresh in-memory SQLite engine with the schema created
    mock_llm:         AsyncMock standing in for the Gemini gateway
    test_client:      httpx AsyncClient wired to the app, real SQLite store,
                      mocked LLM gateway
"""

import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LLM_API_KEY"] = "test-key-not-real"
os.environ["CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from noteforge.database import Base, get_db_session  # noqa: E402
from noteforge.models.note import Note  # noqa: E402,F401
from noteforge.services.llm_base import LLMService  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared by every connection of one test (StaticPool).
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def mock_llm():
    """Gateway double; `generate` answers "AI text" unless a test changes it."""
    llm = MagicMock(spec=LLMService)
    llm.api_key = "test-key-not-real"
    llm.generate = AsyncMock(return_value="AI text")
    llm.health_check = AsyncMock(return_value=True)
    return llm


@pytest_asyncio.fixture
async def test_client(db_engine, mock_llm, monkeypatch):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    - get_db_session is overridden to use the per-test SQLite engine
    - the AI service talks to `mock_llm` instead of Gemini
    - app exceptions become 500 responses instead of being re-raised

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    from noteforge.main import app
    from noteforge.services.ai_service import ai_service

    factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    monkeypatch.setattr(ai_service, "llm", mock_llm)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_note(test_client):
    """
    Creates a note through the API and returns its JSON.

    Usage:
        note = await make_note(title="A", body="hello")
    """
    async def _make(**fields):
        response = await test_client.post("/api/notes", json=fields)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
