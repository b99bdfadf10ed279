"""Tests for the search orchestration flow."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from fundfinder.core.errors import (
    InvalidInputError,
    NotAuthenticated,
    RateLimitExceeded,
    UpstreamError,
)
from fundfinder.models.user import SubscriptionStatus
from fundfinder.services.rate_gate import RateGate
from fundfinder.services.search import SearchService
from fundfinder.services.usage_ledger import usage_ledger
from tests.conftest import TODAY, VALID_AI_TEXT, FakeLeadClient


def _service(client) -> SearchService:
    return SearchService(client=client, gate=RateGate(limit=3))


async def _search(service, db, user_id, day=TODAY, **fields):
    params = {"business_type": "Bakery", "location": "Austin, TX", "purpose": "Equipment"}
    params.update(fields)
    return await service.handle_search(db, user_id, day=day, **params)


class TestSuccessfulSearches:
    @pytest.mark.asyncio
    async def test_returns_leads_and_counts_usage(self, db, make_user):
        user = await make_user()
        client = FakeLeadClient()

        leads = await _search(_service(client), db, user.id)

        assert len(leads) == 3
        assert await usage_ledger.count_today(db, user.id, TODAY) == 1
        assert client.calls[0].business_type == "Bakery"

    @pytest.mark.asyncio
    async def test_quota_fills_then_denies(self, db, make_user):
        user = await make_user()
        client = FakeLeadClient()
        service = _service(client)

        for k in range(1, 4):
            await _search(service, db, user.id)
            assert await usage_ledger.count_today(db, user.id, TODAY) == k

        with pytest.raises(RateLimitExceeded) as exc_info:
            await _search(service, db, user.id)

        body = exc_info.value.to_dict()
        assert body["dailyCount"] == 3
        assert body["limit"] == 3
        # Denied requests never reach the AI
        assert len(client.calls) == 3

    @pytest.mark.asyncio
    async def test_new_day_resets_quota(self, db, make_user):
        user = await make_user()
        service = _service(FakeLeadClient())
        for _ in range(3):
            await _search(service, db, user.id)
        with pytest.raises(RateLimitExceeded):
            await _search(service, db, user.id)

        tomorrow = TODAY + timedelta(days=1)
        leads = await _search(service, db, user.id, day=tomorrow)

        assert len(leads) == 3
        assert await usage_ledger.count_today(db, user.id, tomorrow) == 1

    @pytest.mark.asyncio
    async def test_pro_user_is_never_denied(self, db, make_user):
        user = await make_user(SubscriptionStatus.ACTIVE)
        service = _service(FakeLeadClient())

        for _ in range(10):
            assert len(await _search(service, db, user.id)) == 3

    @pytest.mark.asyncio
    async def test_purpose_defaults_when_omitted(self, db, make_user):
        user = await make_user()
        client = FakeLeadClient()

        await _search(_service(client), db, user.id, purpose=None)

        assert client.calls[0].purpose == "General funding"


class TestFailedSearches:
    @pytest.mark.asyncio
    async def test_requires_user(self, db):
        client = FakeLeadClient()
        with pytest.raises(NotAuthenticated, match="Please login to search"):
            await _search(_service(client), db, None)
        assert client.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["business_type", "location"])
    async def test_required_fields(self, db, make_user, field):
        user = await make_user()
        client = FakeLeadClient()

        with pytest.raises(InvalidInputError):
            await _search(_service(client), db, user.id, **{field: "   "})

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_upstream_failure_is_not_charged(self, db, make_user):
        user = await make_user()
        for _ in range(2):
            await usage_ledger.increment_today(db, user.id, TODAY)
        service = _service(FakeLeadClient(error=UpstreamError("AI service returned HTTP 500")))

        with pytest.raises(UpstreamError):
            await _search(service, db, user.id)

        assert await usage_ledger.count_today(db, user.id, TODAY) == 2
        decision = await service.gate.check(db, user.id, TODAY)
        assert decision.allowed is True
        assert decision.daily_count == 2

    @pytest.mark.asyncio
    async def test_prose_response_is_not_charged(self, db, make_user):
        user = await make_user()
        prose = "I could not find any funding sources, sorry."
        service = _service(FakeLeadClient(text=prose))

        with pytest.raises(UpstreamError) as exc_info:
            await _search(service, db, user.id)

        assert exc_info.value.diagnostic == prose
        assert await usage_ledger.count_today(db, user.id, TODAY) == 0

    @pytest.mark.asyncio
    async def test_cancelled_call_is_not_charged(self, db, make_user):
        user = await make_user()
        client = FakeLeadClient(error=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await _search(_service(client), db, user.id)

        assert await usage_ledger.count_today(db, user.id, TODAY) == 0

    @pytest.mark.asyncio
    async def test_store_outage_fails_closed(self, db, make_user):
        user = await make_user()
        client = FakeLeadClient()
        ledger = AsyncMock()
        ledger.count_today.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        service = SearchService(client=client, gate=RateGate(ledger=ledger, limit=3))

        with pytest.raises(OperationalError):
            await _search(service, db, user.id)

        assert client.calls == []


class GatedLeadClient:
    """Holds every caller until all parties have passed admission."""

    def __init__(self, parties: int) -> None:
        self.parties = parties
        self.arrived = 0
        self.ready = asyncio.Event()

    async def complete(self, context) -> str:
        self.arrived += 1
        if self.arrived >= self.parties:
            self.ready.set()
        await asyncio.wait_for(self.ready.wait(), timeout=5)
        return VALID_AI_TEXT


@pytest.mark.asyncio
async def test_concurrent_searches_may_overshoot_by_one(session_maker, make_user):
    """Two simultaneous searches both see count 2 and both succeed.

    Requests for the same user are not serialized; the free limit can be
    exceeded by concurrent requests but no increment is ever lost.
    """
    user = await make_user()
    async with session_maker() as session:
        for _ in range(2):
            await usage_ledger.increment_today(session, user.id, TODAY)

    service = _service(GatedLeadClient(parties=2))

    async def search():
        async with session_maker() as session:
            return await _search(service, session, user.id)

    results = await asyncio.gather(search(), search())

    assert all(len(leads) == 3 for leads in results)
    async with session_maker() as session:
        assert await usage_ledger.count_today(session, user.id, TODAY) == 4
        with pytest.raises(RateLimitExceeded):
            await _search(service, session, user.id)
