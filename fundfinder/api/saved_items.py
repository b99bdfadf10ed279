"""Saved item endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from fundfinder.deps import DbSession, UserId
from fundfinder.models.saved_item import SavedItem
from fundfinder.schemas.saved_item import SavedItemCreate, SavedItemRead
from fundfinder.services.saved_items import saved_item_service

router = APIRouter()


@router.get("", response_model=list[SavedItemRead])
async def list_saved_items(user_id: UserId, db: DbSession) -> list[SavedItem]:
    return await saved_item_service.list_items(db, user_id)


@router.post("", response_model=SavedItemRead, status_code=status.HTTP_201_CREATED)
async def save_item(body: SavedItemCreate, user_id: UserId, db: DbSession) -> SavedItem:
    """Bookmark a lead."""
    return await saved_item_service.add_item(db, user_id, body)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_item(item_id: UUID, user_id: UserId, db: DbSession) -> None:
    await saved_item_service.delete_item(db, user_id, item_id)
