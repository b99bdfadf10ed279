"""API router aggregating all endpoints."""

from fastapi import APIRouter

from fundfinder.api import account, auth, billing, saved_items, search, webhooks

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(search.router, tags=["search"])
api_router.include_router(account.router, tags=["account"])
api_router.include_router(saved_items.router, prefix="/saved-items", tags=["saved-items"])
api_router.include_router(billing.router, tags=["billing"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
