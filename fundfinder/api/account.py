"""Account status endpoint."""

from fastapi import APIRouter

from fundfinder.deps import CurrentUser, DbSession
from fundfinder.schemas.account import AccountStatus
from fundfinder.services.rate_gate import rate_gate
from fundfinder.services.usage_ledger import usage_ledger

router = APIRouter()


@router.get("/account-status", response_model=AccountStatus)
async def account_status(user: CurrentUser, db: DbSession) -> AccountStatus:
    """Get account fields and remaining searches for today. Never consumes quota."""
    day = usage_ledger.usage_day()
    searches_left = await rate_gate.searches_left(db, user.id, day)

    return AccountStatus(
        id=user.id,
        name=user.name,
        email=user.email,
        subscription_status=user.subscription_status,
        daily_search_limit=None if user.is_pro else rate_gate.limit,
        daily_searches_left=searches_left,
    )
