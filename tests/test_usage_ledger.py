"""Tests for the daily usage ledger."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from fundfinder.models.usage_record import UsageRecord
from fundfinder.services.usage_ledger import UsageLedger, usage_ledger
from tests.conftest import TODAY


class TestCountToday:
    @pytest.mark.asyncio
    async def test_missing_record_counts_as_zero(self, db, make_user):
        user = await make_user()
        assert await usage_ledger.count_today(db, user.id, TODAY) == 0

    @pytest.mark.asyncio
    async def test_reflects_increments(self, db, make_user):
        user = await make_user()
        for expected in (1, 2, 3):
            assert await usage_ledger.increment_today(db, user.id, TODAY) == expected
        assert await usage_ledger.count_today(db, user.id, TODAY) == 3

    @pytest.mark.asyncio
    async def test_other_days_do_not_leak_into_today(self, db, make_user):
        user = await make_user()
        yesterday = TODAY - timedelta(days=1)
        for _ in range(3):
            await usage_ledger.increment_today(db, user.id, yesterday)

        assert await usage_ledger.count_today(db, user.id, TODAY) == 0
        assert await usage_ledger.count_today(db, user.id, yesterday) == 3

    @pytest.mark.asyncio
    async def test_users_are_counted_separately(self, db, make_user):
        alice = await make_user()
        bob = await make_user()
        await usage_ledger.increment_today(db, alice.id, TODAY)

        assert await usage_ledger.count_today(db, bob.id, TODAY) == 0


class TestIncrementToday:
    @pytest.mark.asyncio
    async def test_creates_single_row_per_user_and_day(self, db, make_user):
        user = await make_user()
        await usage_ledger.increment_today(db, user.id, TODAY)
        await usage_ledger.increment_today(db, user.id, TODAY)

        rows = await db.execute(
            select(func.count(UsageRecord.id)).where(UsageRecord.user_id == user.id)
        )
        assert rows.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, session_maker, make_user):
        """N simultaneous increments yield N distinct successive counts."""
        user = await make_user()
        n = 10

        async def increment() -> int:
            async with session_maker() as session:
                return await usage_ledger.increment_today(session, user.id, TODAY)

        results = await asyncio.gather(*(increment() for _ in range(n)))

        assert sorted(results) == list(range(1, n + 1))
        async with session_maker() as session:
            assert await usage_ledger.count_today(session, user.id, TODAY) == n

    @pytest.mark.asyncio
    async def test_concurrent_increments_on_existing_row(self, session_maker, make_user):
        user = await make_user()
        async with session_maker() as session:
            await usage_ledger.increment_today(session, user.id, TODAY)
            await usage_ledger.increment_today(session, user.id, TODAY)

        async def increment() -> int:
            async with session_maker() as session:
                return await usage_ledger.increment_today(session, user.id, TODAY)

        results = await asyncio.gather(*(increment() for _ in range(5)))

        assert sorted(results) == [3, 4, 5, 6, 7]


class TestUsageDay:
    def test_utc_day(self):
        now = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
        assert usage_ledger.usage_day(now) == TODAY

    def test_configured_timezone_shifts_day(self):
        ledger = UsageLedger()
        ledger.settings = ledger.settings.model_copy(update={"usage_timezone": "Asia/Tokyo"})
        now = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
        assert ledger.usage_day(now) == TODAY + timedelta(days=1)
