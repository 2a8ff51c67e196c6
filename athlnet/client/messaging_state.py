"""Conversation thread with pending messages that resolve or disappear."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping
from uuid import uuid4

import httpx

from .api import ApiError

logger = logging.getLogger(__name__)

SendCommand = Callable[[str], Mapping[str, Any]]


@dataclass(slots=True)
class ThreadMessage:
    content: str
    sender_id: str
    id: str | None = None
    status: str = "sent"
    created_at: Any = None
    local_id: str = field(default_factory=lambda: uuid4().hex)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ThreadMessage":
        return cls(
            id=str(record["id"]),
            content=record.get("content") or "",
            sender_id=str(record["sender_id"]),
            created_at=record.get("created_at"),
        )


class ConversationThread:
    def __init__(self, *, viewer_id: Any, other_user_id: Any, messages: Iterable[Mapping[str, Any]] = ()) -> None:
        self.viewer_id = str(viewer_id)
        self.other_user_id = str(other_user_id)
        self.messages: list[ThreadMessage] = [ThreadMessage.from_record(record) for record in messages]
        self.last_error: str | None = None

    @property
    def pending(self) -> list[ThreadMessage]:
        return [message for message in self.messages if message.status == "pending"]

    def send(self, content: str, command: SendCommand) -> ThreadMessage | None:
        text = (content or "").strip()
        if not text:
            return None

        pending = ThreadMessage(content=text, sender_id=self.viewer_id, status="pending")
        self.messages.append(pending)
        self.last_error = None
        try:
            record = command(text)
        except (ApiError, httpx.HTTPError) as exc:
            self.messages.remove(pending)
            self.last_error = str(exc)
            logger.warning("Message to %s failed: %s", self.other_user_id, exc)
            return None

        stored = ThreadMessage.from_record(record)
        self.messages[self.messages.index(pending)] = stored
        return stored

    def apply_event(self, event: Mapping[str, Any]) -> bool:
        """Append a ``message_created`` event unless that message is already shown."""

        if event.get("type") != "message_created":
            return False
        record = event.get("message") or {}
        if any(message.id == str(record.get("id")) for message in self.messages):
            return False
        self.messages.append(ThreadMessage.from_record(record))
        return True


__all__ = ["ConversationThread", "ThreadMessage", "SendCommand"]
