"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .role import RESIDENCE_NOTIFICATION_VIEWER_ROLES, UserRole

EVENT_RESIDENCE_EXPIRY = "residence_expiry"
EVENT_RESIDENCE_EXPIRY_MANAGER = "residence_expiry_manager"
EVENT_RESIDENCE_RENEWED = "residence_renewed"

# Event types hidden from roles that may not see residence data.
RESIDENCE_RESTRICTED_EVENTS = frozenset(
    {EVENT_RESIDENCE_EXPIRY, EVENT_RESIDENCE_EXPIRY_MANAGER}
)


class NotificationPriority(str, Enum):
    """Urgency attached to a notification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    event_type: str
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


def is_visible_to_role(event_type: str, role: UserRole) -> bool:
    """Residence expiry alerts only reach roles with residence visibility."""

    if event_type not in RESIDENCE_RESTRICTED_EVENTS:
        return True
    return role in RESIDENCE_NOTIFICATION_VIEWER_ROLES


__all__ = [
    "EVENT_RESIDENCE_EXPIRY",
    "EVENT_RESIDENCE_EXPIRY_MANAGER",
    "EVENT_RESIDENCE_RENEWED",
    "RESIDENCE_RESTRICTED_EVENTS",
    "Notification",
    "NotificationPriority",
    "is_visible_to_role",
]
