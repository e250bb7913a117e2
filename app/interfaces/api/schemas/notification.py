"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationPriority


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    event_type: str
    title: str
    message: str
    priority: NotificationPriority
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None
    read_at: datetime | None = None
    is_read: bool

    model_config = ConfigDict(from_attributes=True)


class NotificationCountResponse(BaseModel):
    updated: int


__all__ = [
    "NotificationCountResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
]
