"""Saved item schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from fundfinder.schemas.lead import CamelModel, Lead


class SavedItemCreate(Lead):
    """A lead submitted for bookmarking."""


class SavedItemRead(CamelModel):
    """Schema for reading a saved item."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: UUID
    name: str
    type: str
    amount: str | None
    deadline: str | None
    link: str | None
    match_reason: str | None
    created_at: datetime | None = None
