"""Stripe one-time checkout for unlimited searches."""

import logging
from dataclasses import dataclass
from uuid import UUID

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.config import get_settings
from fundfinder.core.errors import PaymentError
from fundfinder.models.user import User
from fundfinder.services.accounts import account_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutVerification:
    """Paid/unpaid state of a checkout session and whose it is."""

    paid: bool
    user_id: UUID | None


def _session_user_id(session: stripe.checkout.Session) -> UUID | None:
    raw = session.client_reference_id
    if not raw and session.metadata:
        raw = session.metadata.get("user_id")
    try:
        return UUID(str(raw)) if raw else None
    except ValueError:
        return None


class StripeService:
    """Service for Stripe billing operations."""

    def __init__(self) -> None:
        self.settings = get_settings()
        stripe.api_key = self.settings.stripe_secret_key

    @property
    def configured(self) -> bool:
        return bool(self.settings.stripe_secret_key)

    def _line_item(self) -> dict:
        if self.settings.stripe_pro_price_id:
            return {"price": self.settings.stripe_pro_price_id, "quantity": 1}
        return {
            "price_data": {
                "currency": self.settings.pro_price_currency,
                "unit_amount": self.settings.pro_price_cents,
                "product_data": {"name": "FundFinder Pro - unlimited searches"},
            },
            "quantity": 1,
        }

    def create_checkout(
        self,
        user: User,
        success_url: str,
        cancel_url: str,
    ) -> tuple[str, str]:
        """Create a Stripe Checkout session for the one-time upgrade.

        Args:
            user: User paying for the upgrade
            success_url: URL to redirect to on success
            cancel_url: URL to redirect to on cancel

        Returns:
            (checkout session id, hosted checkout URL)
        """
        if not self.configured:
            raise PaymentError("Billing not configured", status_code=503)

        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                line_items=[self._line_item()],
                customer_email=user.email,
                client_reference_id=str(user.id),
                success_url=success_url,
                cancel_url=cancel_url,
                metadata={
                    "user_id": str(user.id),
                },
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout creation failed for user %s: %s", user.id, e)
            raise PaymentError("Could not start checkout", status_code=502) from e

        return session.id, session.url

    def verify_checkout(self, session_id: str) -> CheckoutVerification:
        """Look up whether a checkout session has been paid."""
        if not self.configured:
            raise PaymentError("Billing not configured", status_code=503)

        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.InvalidRequestError as e:
            raise PaymentError("Unknown checkout session") from e
        except stripe.StripeError as e:
            logger.error("Stripe checkout lookup failed for %s: %s", session_id, e)
            raise PaymentError("Could not verify payment", status_code=502) from e

        return CheckoutVerification(
            paid=session.payment_status == "paid",
            user_id=_session_user_id(session),
        )

    async def handle_checkout_completed(
        self,
        db: AsyncSession,
        session: stripe.checkout.Session,
    ) -> None:
        """Handle checkout.session.completed webhook event.

        Args:
            db: Database session
            session: Stripe checkout session object
        """
        user_id = _session_user_id(session)
        if user_id is None:
            logger.warning("Checkout session %s has no user reference", session.id)
            return

        if session.payment_status != "paid":
            logger.info("Checkout session %s completed unpaid (%s)", session.id, session.payment_status)
            return

        await account_service.activate(db, user_id, checkout_session_id=session.id)


# Global instance
stripe_service = StripeService()
