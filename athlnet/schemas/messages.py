"""Schemas used by messaging endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .profiles import UserSummary

MessageType = Literal["text", "image", "file", "collaboration"]


class MessageSendRequest(BaseModel):
    recipient_id: UUID
    content: str = Field(default="", max_length=4000)
    media_url: str | None = Field(default=None, max_length=2048)
    type: MessageType | None = None


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: str
    sender_id: UUID
    recipient_id: UUID
    type: str
    content: str
    media_url: str | None = None
    read: bool = False
    created_at: datetime
    sender: UserSummary | None = None


class ConversationSummary(BaseModel):
    id: str
    members: List[UUID]
    other_user: UserSummary
    last_message: str | None = None
    last_message_at: datetime | None = None
    last_message_by: UUID | None = None
    unread_count: int = 0


class ConversationListResponse(BaseModel):
    items: List[ConversationSummary]


class ConversationThreadResponse(BaseModel):
    conversation_id: str
    other_user: UserSummary
    messages: List[MessageResponse]


class MarkReadResponse(BaseModel):
    conversation_id: str
    updated: int


__all__ = [
    "MessageType",
    "MessageSendRequest",
    "MessageResponse",
    "ConversationSummary",
    "ConversationListResponse",
    "ConversationThreadResponse",
    "MarkReadResponse",
]
