"""Pydantic schemas for API request/response validation."""

from fundfinder.schemas.lead import CamelModel, Lead, LeadType, SearchRequest
from fundfinder.schemas.account import AccountStatus, LoginRequest, RegisterRequest, TokenResponse
from fundfinder.schemas.saved_item import SavedItemCreate, SavedItemRead
from fundfinder.schemas.billing import CheckoutResponse, VerifyPaymentResponse

__all__ = [
    "CamelModel",
    "Lead",
    "LeadType",
    "SearchRequest",
    "AccountStatus",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "SavedItemCreate",
    "SavedItemRead",
    "CheckoutResponse",
    "VerifyPaymentResponse",
]
