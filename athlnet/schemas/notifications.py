"""Schemas for the notification inbox."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

NotificationKind = Literal[
    "generic",
    "follow.new",
    "post.like",
    "post.comment",
    "message.received",
    "coaching.request",
    "coaching.accepted",
]


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recipient_id: UUID
    sender_id: UUID
    type: NotificationKind
    content: str
    read: bool
    payload: dict[str, Any] | None = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int = 0


class NotificationsMarkedResponse(BaseModel):
    """How many unread notifications were flipped to read."""

    updated: int


__all__ = ["NotificationKind", "NotificationResponse", "NotificationListResponse", "NotificationsMarkedResponse"]
