"""
Shared fixtures for the dial tester test suite.

The application reads its settings at import time, so the test database
and environment are configured here before anything from ``dialtester``
is imported.
"""
import os
import tempfile
from pathlib import Path

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="dialtester-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR / 'test.db'}"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio

from dialtester.core.database import Base, create_tables, engine


class FakeClock:
    """Wall clock in seconds that only moves when told to."""

    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def db_tables():
    """Fresh tables for each test."""
    await create_tables()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def app():
    from dialtester.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def client(app, db_tables):
    """HTTP client bound to the ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def session_id(client):
    response = await client.post("/api/sessions", json={"email": "participant@example.com"})
    assert response.status_code == 200
    return response.json()["session"]["id"]
