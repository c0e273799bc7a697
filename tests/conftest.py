"""
Pytest configuration and shared fixtures.

Unit tests run against an in-memory SQLite database and a fake Gemini
transport, so no server, database or network is needed.
"""

import json
import os

# Must be set before app modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models import Team, User
from app.services.gemini_client import GeminiClient


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine():
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
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def candidate(db) -> User:
    user = User(auth_id="auth-candidate-1", email="candidate@example.com", full_name="Linh Tran")
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def teams(db) -> list:
    rows = [
        Team(name="Platform Engineering"),
        Team(name="Customer Success"),
        Team(name="Data Science"),
    ]
    db.add_all(rows)
    await db.commit()
    return rows


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


def gemini_response(payload, finish_reason: str = "STOP") -> dict:
    """A generateContent response whose single text part is `payload` as JSON."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
            }
        ]
    }


class FakeGeminiTransport:
    """Async stand-in for the HTTP POST; replays queued responses and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, status: int, payload, headers=None) -> None:
        self.responses.append((status, payload, headers or {}))

    async def __call__(self, url, json_body, params):
        self.calls.append({"url": url, "body": json_body, "params": params})
        if not self.responses:
            raise AssertionError("unexpected Gemini call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def gemini_transport():
    return FakeGeminiTransport()


@pytest.fixture
def gemini_client(gemini_transport):
    return GeminiClient(
        api_key="test-key",
        base_url="https://gemini.test/v1beta",
        model="gemini-test",
        debug_logs=False,
        fetcher=gemini_transport,
    )


@pytest.fixture
def make_gemini_response():
    return gemini_response
