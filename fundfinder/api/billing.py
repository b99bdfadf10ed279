"""Billing API endpoints."""

import logging

from fastapi import APIRouter

from fundfinder.config import get_settings
from fundfinder.core.errors import ForbiddenError, PaymentError
from fundfinder.deps import CurrentUser, DbSession
from fundfinder.schemas.billing import CheckoutResponse, VerifyPaymentResponse
from fundfinder.services.accounts import account_service
from fundfinder.services.stripe_service import stripe_service

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout(user: CurrentUser) -> CheckoutResponse:
    """Create a Stripe Checkout session for the one-time upgrade.

    The user will be redirected to Stripe's hosted checkout page.
    """
    if user.is_pro:
        raise PaymentError("Account already has unlimited searches")

    base_url = settings.app_base_url.rstrip("/")
    session_id, url = stripe_service.create_checkout(
        user,
        success_url=f"{base_url}/?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/?checkout=cancelled",
    )
    return CheckoutResponse(session_id=session_id, url=url)


@router.get("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(session_id: str, user: CurrentUser, db: DbSession) -> VerifyPaymentResponse:
    """Check a checkout session and upgrade the account once it is paid."""
    verification = stripe_service.verify_checkout(session_id)

    if verification.user_id != user.id:
        logger.warning("User %s tried to verify checkout %s not issued to them", user.id, session_id)
        raise ForbiddenError("Checkout session belongs to another account")

    if verification.paid:
        user = await account_service.activate(db, user.id, checkout_session_id=session_id)

    return VerifyPaymentResponse(
        paid=verification.paid,
        subscription_status=user.subscription_status,
    )
