"""Admission control for search requests."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.config import get_settings
from fundfinder.models.user import SubscriptionStatus
from fundfinder.services.subscription import SubscriptionService, subscription_service
from fundfinder.services.usage_ledger import UsageLedger, usage_ledger


class DecisionReason(str, Enum):
    PRO_UNLIMITED = "pro-unlimited"
    WITHIN_FREE_QUOTA = "within-free-quota"
    QUOTA_EXHAUSTED = "quota-exhausted"


@dataclass(frozen=True)
class RateDecision:
    """Outcome of a quota check. Never persisted."""

    allowed: bool
    reason: DecisionReason
    daily_count: int | None = None
    limit: int | None = None


class RateGate:
    """Decides whether a search may proceed.

    Reads only: calling ``check`` any number of times never consumes quota.
    """

    def __init__(
        self,
        subscriptions: SubscriptionService | None = None,
        ledger: UsageLedger | None = None,
        limit: int | None = None,
    ) -> None:
        self.subscriptions = subscriptions or subscription_service
        self.ledger = ledger or usage_ledger
        self.limit = get_settings().free_daily_search_limit if limit is None else limit

    async def check(self, db: AsyncSession, user_id: UUID, day: date) -> RateDecision:
        status = await self.subscriptions.status_of(db, user_id)

        # Pro users bypass counting entirely
        if status == SubscriptionStatus.ACTIVE:
            return RateDecision(allowed=True, reason=DecisionReason.PRO_UNLIMITED)

        count = await self.ledger.count_today(db, user_id, day)

        # Reaching the limit means exhausted
        if count >= self.limit:
            return RateDecision(
                allowed=False,
                reason=DecisionReason.QUOTA_EXHAUSTED,
                daily_count=count,
                limit=self.limit,
            )

        return RateDecision(
            allowed=True,
            reason=DecisionReason.WITHIN_FREE_QUOTA,
            daily_count=count,
            limit=self.limit,
        )

    async def searches_left(self, db: AsyncSession, user_id: UUID, day: date) -> int | str:
        """Remaining searches for display: ``"unlimited"`` or a non-negative int."""
        decision = await self.check(db, user_id, day)
        if decision.reason == DecisionReason.PRO_UNLIMITED:
            return "unlimited"
        return max(0, self.limit - (decision.daily_count or 0))


# Global instance
rate_gate = RateGate()
