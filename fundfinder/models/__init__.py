"""SQLAlchemy models package."""

from fundfinder.models.user import SubscriptionStatus, User
from fundfinder.models.usage_record import UsageRecord
from fundfinder.models.saved_item import SavedItem

__all__ = [
    "User",
    "SubscriptionStatus",
    "UsageRecord",
    "SavedItem",
]
