"""Saved item (bookmark) storage."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fundfinder.core.errors import NotFoundError
from fundfinder.models.saved_item import SavedItem
from fundfinder.schemas.saved_item import SavedItemCreate


class SavedItemService:
    """Service for a user's saved leads."""

    async def list_items(self, db: AsyncSession, user_id: UUID) -> list[SavedItem]:
        result = await db.execute(
            select(SavedItem)
            .where(SavedItem.user_id == user_id)
            .order_by(SavedItem.created_at.desc(), SavedItem.name)
        )
        return list(result.scalars().all())

    async def add_item(self, db: AsyncSession, user_id: UUID, lead: SavedItemCreate) -> SavedItem:
        item = SavedItem(
            user_id=user_id,
            name=lead.name,
            type=lead.type.value,
            amount=lead.amount,
            deadline=lead.deadline,
            link=lead.link,
            match_reason=lead.match_reason,
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
        return item

    async def delete_item(self, db: AsyncSession, user_id: UUID, item_id: UUID) -> None:
        """Delete one of the user's items.

        Raises:
            NotFoundError: If the item does not exist or belongs to someone else
        """
        result = await db.execute(
            select(SavedItem)
            .where(SavedItem.id == item_id)
            .where(SavedItem.user_id == user_id)
        )
        item = result.scalar_one_or_none()

        if item is None:
            raise NotFoundError("Saved item not found")

        await db.delete(item)
        await db.commit()


# Global instance
saved_item_service = SavedItemService()
