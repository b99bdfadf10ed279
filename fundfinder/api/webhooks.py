"""Stripe webhooks endpoint."""

import logging

import stripe
from fastapi import APIRouter, Request

from fundfinder.config import get_settings
from fundfinder.core.errors import InvalidInputError
from fundfinder.deps import DbSession
from fundfinder.services.stripe_service import stripe_service

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


@router.post("/stripe")
async def stripe_webhook(request: Request, db: DbSession) -> dict:
    """Handle Stripe webhook events.

    Only ``checkout.session.completed`` matters: a paid one-time checkout
    switches the account to unlimited searches.
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        raise InvalidInputError("Missing Stripe signature")

    try:
        event = stripe.Webhook.construct_event(
            payload, sig_header, settings.stripe_webhook_secret
        )
    except ValueError:
        logger.error("Invalid webhook payload")
        raise InvalidInputError("Invalid payload")
    except stripe.SignatureVerificationError:
        logger.error("Invalid webhook signature")
        raise InvalidInputError("Invalid signature")

    logger.info("Received Stripe webhook: %s", event.type)

    try:
        match event.type:
            case "checkout.session.completed" | "checkout.session.async_payment_succeeded":
                await stripe_service.handle_checkout_completed(db, event.data.object)
                logger.info("Checkout session processed")

            case _:
                logger.debug("Unhandled event type: %s", event.type)

    except Exception as e:
        # Acknowledge anyway; a retry would hit the same bug
        logger.exception("Error processing webhook %s: %s", event.type, e)

    return {"status": "ok"}
