"""Search orchestration: auth, admission, AI call, usage accounting."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.config import get_settings
from fundfinder.core.errors import (
    InvalidInputError,
    NotAuthenticated,
    RateLimitExceeded,
    UpstreamError,
)
from fundfinder.schemas.lead import Lead
from fundfinder.services.lead_finder import (
    LeadSearchClient,
    SearchContext,
    gemini_client,
    parse_leads,
)
from fundfinder.services.rate_gate import RateGate, rate_gate
from fundfinder.services.usage_ledger import UsageLedger, usage_ledger

logger = logging.getLogger(__name__)


class SearchService:
    """Runs one search request from admission to accounting.

    This is the only place where a search is considered successful, and
    usage is recorded only after a fully parsed lead list is in hand.
    """

    def __init__(
        self,
        client: LeadSearchClient | None = None,
        gate: RateGate | None = None,
        ledger: UsageLedger | None = None,
    ) -> None:
        self.settings = get_settings()
        self.client = client or gemini_client
        self.gate = gate or rate_gate
        self.ledger = ledger or usage_ledger

    def _validate(
        self,
        business_type: str | None,
        location: str | None,
        purpose: str | None,
    ) -> SearchContext:
        business_type = (business_type or "").strip()
        location = (location or "").strip()
        purpose = (purpose or "").strip() or self.settings.default_search_purpose

        if not business_type or not location:
            raise InvalidInputError("Missing required fields: businessType and location")

        max_length = self.settings.search_field_max_length
        if max(len(business_type), len(location), len(purpose)) > max_length:
            raise InvalidInputError(f"Fields must be at most {max_length} characters")

        return SearchContext(business_type=business_type, location=location, purpose=purpose)

    async def handle_search(
        self,
        db: AsyncSession,
        user_id: UUID | None,
        business_type: str | None,
        location: str | None,
        purpose: str | None = None,
        day: date | None = None,
    ) -> list[Lead]:
        """Run a search for an authenticated user.

        Args:
            db: Database session
            user_id: Authenticated user, or None when no session was presented
            business_type: Kind of business looking for funding
            location: Where the business operates
            purpose: What the money is for; defaults to a generic purpose
            day: Usage day; computed here when omitted

        Returns:
            Parsed leads

        Raises:
            NotAuthenticated: No user id
            InvalidInputError: Missing or oversized fields
            RateLimitExceeded: Free quota is used up; the AI is not called
            UpstreamError: The AI call failed or returned unusable content
        """
        if user_id is None:
            raise NotAuthenticated("Please login to search")

        # Fixed once so the check and the increment agree on the day
        day = day or self.ledger.usage_day()

        context = self._validate(business_type, location, purpose)

        decision = await self.gate.check(db, user_id, day)
        if not decision.allowed:
            logger.info(
                "Search denied for user %s: %s (%s/%s)",
                user_id,
                decision.reason.value,
                decision.daily_count,
                decision.limit,
            )
            raise RateLimitExceeded(decision)

        # End the read transaction before the slow external call
        await db.commit()

        try:
            raw_text = await self.client.complete(context)
            leads = parse_leads(raw_text)
        except UpstreamError as e:
            logger.warning("Search failed upstream for user %s: %s; usage not recorded", user_id, e.message)
            raise

        new_count = await self.ledger.increment_today(db, user_id, day)
        logger.info(
            "Search succeeded for user %s (%s, %d leads, count %d)",
            user_id,
            decision.reason.value,
            len(leads),
            new_count,
        )
        return leads


# Global instance
search_service = SearchService()
