"""Account registration, login and upgrade."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.core.auth import session_auth
from fundfinder.core.errors import ConflictError, NotAuthenticated, UserNotFound
from fundfinder.models.user import SubscriptionStatus, User

logger = logging.getLogger(__name__)


class AccountService:
    """Service for user accounts."""

    async def get_user(self, db: AsyncSession, user_id: UUID) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFound(user_id)
        return user

    async def register(self, db: AsyncSession, name: str, email: str, password: str) -> User:
        """Create a free account.

        Raises:
            ConflictError: If the email is already registered
        """
        email = email.strip().lower()
        result = await db.execute(select(User.id).where(User.email == email))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Email already registered")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=session_auth.hash_password(password),
            subscription_status=SubscriptionStatus.FREE.value,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            await db.rollback()
            raise ConflictError("Email already registered") from e
        await db.refresh(user)

        logger.info("Registered user %s", user.id)
        return user

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """Check credentials.

        Raises:
            NotAuthenticated: If the email is unknown or the password is wrong
        """
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        user = result.scalar_one_or_none()

        if user is None or not session_auth.verify_password(password, user.password_hash):
            raise NotAuthenticated("Invalid email or password")

        return user

    async def activate(
        self,
        db: AsyncSession,
        user_id: UUID,
        checkout_session_id: str | None = None,
    ) -> User:
        """Mark a user as paid. Idempotent for repeated verifications."""
        user = await self.get_user(db, user_id)

        if user.subscription_status != SubscriptionStatus.ACTIVE.value:
            user.subscription_status = SubscriptionStatus.ACTIVE.value
            user.stripe_checkout_session_id = checkout_session_id
            user.upgraded_at = datetime.now(timezone.utc)
            await db.commit()
            logger.info("Activated unlimited searches for user %s", user_id)

        return user


# Global instance
account_service = AccountService()
