"""User model - account record and subscription flag."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fundfinder.database import Base

if TYPE_CHECKING:
    from fundfinder.models.saved_item import SavedItem
    from fundfinder.models.usage_record import UsageRecord


class SubscriptionStatus(str, Enum):
    """Subscription status values."""

    FREE = "free"
    ACTIVE = "active"


class User(Base):
    """User represents a registered account."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    subscription_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SubscriptionStatus.FREE.value,
        server_default=SubscriptionStatus.FREE.value,
    )
    stripe_checkout_session_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )
    upgraded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    usage_records: Mapped[list["UsageRecord"]] = relationship(
        "UsageRecord",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    saved_items: Mapped[list["SavedItem"]] = relationship(
        "SavedItem",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_pro(self) -> bool:
        """Check if the one-time upgrade has been paid."""
        return self.subscription_status == SubscriptionStatus.ACTIVE.value
