"""Per-user, per-day counters of successful searches."""

import logging
from datetime import date, datetime, timezone
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.config import get_settings
from fundfinder.models.usage_record import UsageRecord

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UsageLedger:
    """Durable count of successful searches per user per calendar day."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def usage_day(self, now: datetime | None = None) -> date:
        """Calendar day a request is attributed to.

        Callers compute this once per request and pass it through, so a
        request straddling midnight lands on a single day.
        """
        tz_name = self.settings.usage_timezone
        tz = timezone.utc if tz_name.upper() == "UTC" else ZoneInfo(tz_name)
        now = now or datetime.now(timezone.utc)
        return now.astimezone(tz).date()

    async def count_today(self, db: AsyncSession, user_id: UUID, day: date) -> int:
        """Successful searches recorded for ``day``; 0 when there is no row."""
        result = await db.execute(
            select(UsageRecord.count).where(
                UsageRecord.user_id == user_id,
                UsageRecord.date == day,
            )
        )
        return result.scalar_one_or_none() or 0

    async def increment_today(self, db: AsyncSession, user_id: UUID, day: date) -> int:
        """Atomically add one search to ``day`` and return the new count.

        Uses a single INSERT ... ON CONFLICT DO UPDATE ... RETURNING so that
        concurrent first-of-the-day inserts and concurrent increments are all
        counted. The (user_id, date) unique constraint is what makes the
        conflict path fire.
        """
        dialect = db.get_bind().dialect.name
        insert = UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Atomic usage upsert is not supported on {dialect}")

        stmt = insert(UsageRecord).values(
            id=uuid4(),
            user_id=user_id,
            date=day,
            count=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={
                "count": UsageRecord.count + 1,
                "updated_at": func.now(),
            },
        ).returning(UsageRecord.count)

        result = await db.execute(stmt)
        new_count = result.scalar_one()
        await db.commit()

        logger.debug("Usage for user %s on %s is now %d", user_id, day, new_count)
        return new_count


# Singleton instance
usage_ledger = UsageLedger()
