"""Shared fixtures: per-test SQLite database, users, fake AI client."""

import os

# Environment setup before any fundfinder imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["GEMINI_API_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = "sk_test_mock_key_for_unit_tests_only"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"
os.environ["FREE_DAILY_SEARCH_LIMIT"] = "3"
os.environ["USAGE_TIMEZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "WARNING"

import json
from datetime import date
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from fundfinder.core.auth import session_auth
from fundfinder.database import Base, get_db
from fundfinder.main import app
from fundfinder.models.user import SubscriptionStatus, User
from fundfinder.services.lead_finder import SearchContext
from fundfinder.services.search import search_service

TODAY = date(2026, 10, 19)

SAMPLE_LEADS = [
    {
        "name": "Main Street Growth Grant",
        "type": "Grant",
        "amount": "$5,000 - $20,000",
        "deadline": "Dec 31, 2026",
        "link": "https://example.org/grant",
        "match_reason": "Targets small bakeries expanding locally.",
    },
    {
        "name": "Community Microloan",
        "type": "Loan",
        "amount": "Up to $50,000",
        "deadline": "Rolling",
        "link": "https://example.org/loan",
        "match_reason": "Low-interest loans for equipment purchases.",
    },
    {
        "name": "Local Angels Network",
        "type": "Investor",
        "amount": "$25,000 - $250,000",
        "deadline": "Rolling",
        "link": "https://example.org/angels",
        "match_reason": "Invests in food businesses in the region.",
    },
]

VALID_AI_TEXT = "```json\n" + json.dumps(SAMPLE_LEADS) + "\n```"


class FakeLeadClient:
    """Stands in for the Gemini client."""

    def __init__(self, text: str = VALID_AI_TEXT, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[SearchContext] = []

    async def complete(self, context: SearchContext) -> str:
        self.calls.append(context)
        if self.error is not None:
            raise self.error
        return self.text


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_user(session_maker):
    """Factory inserting a user directly, skipping bcrypt."""
    counter = {"n": 0}

    async def _make_user(status: SubscriptionStatus = SubscriptionStatus.FREE) -> User:
        counter["n"] += 1
        async with session_maker() as session:
            user = User(
                name=f"User {counter['n']}",
                email=f"user{counter['n']}@example.com",
                password_hash="not-a-bcrypt-hash",
                subscription_status=status.value,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id: UUID) -> dict[str, str]:
        return {"Authorization": f"Bearer {session_auth.create_token(user_id)}"}

    return _auth_headers


@pytest.fixture
def fake_client(monkeypatch):
    """Replace the AI collaborator used by the search endpoint."""
    client = FakeLeadClient()
    monkeypatch.setattr(search_service, "client", client)
    return client


@pytest_asyncio.fixture
async def api_client(session_maker):
    """Async FastAPI test client bound to the per-test database."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
