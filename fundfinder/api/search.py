"""Funding search endpoint."""

from fastapi import APIRouter

from fundfinder.deps import DbSession, OptionalUserId
from fundfinder.schemas.lead import Lead, SearchRequest
from fundfinder.services.search import search_service

router = APIRouter()


@router.post("/search-request", response_model=list[Lead])
async def search_request(
    body: SearchRequest,
    user_id: OptionalUserId,
    db: DbSession,
) -> list[Lead]:
    """Find funding leads for a business profile.

    Free accounts get a small number of successful searches per day;
    failed searches are not counted.
    """
    return await search_service.handle_search(
        db,
        user_id,
        business_type=body.business_type,
        location=body.location,
        purpose=body.purpose,
    )
