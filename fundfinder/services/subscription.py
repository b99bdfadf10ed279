"""Subscription status lookups."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.core.errors import UserNotFound
from fundfinder.models.user import SubscriptionStatus, User


class SubscriptionService:
    """Answers whether a user is exempt from the daily search cap."""

    async def status_of(self, db: AsyncSession, user_id: UUID) -> SubscriptionStatus:
        """Read the user's subscription flag.

        The flag is read fresh on every call; it is never cached across
        requests so an upgrade is visible on the very next check.

        Raises:
            UserNotFound: If the id does not resolve to a user
        """
        result = await db.execute(
            select(User.subscription_status).where(User.id == user_id)
        )
        status = result.scalar_one_or_none()

        if status is None:
            raise UserNotFound(user_id)

        return SubscriptionStatus(status)


# Global instance
subscription_service = SubscriptionService()
