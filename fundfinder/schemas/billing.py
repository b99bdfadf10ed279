"""Billing schemas."""

from fundfinder.schemas.lead import CamelModel


class CheckoutResponse(CamelModel):
    """Response for checkout session creation."""

    session_id: str
    url: str


class VerifyPaymentResponse(CamelModel):
    """Outcome of checking a checkout session."""

    paid: bool
    subscription_status: str
