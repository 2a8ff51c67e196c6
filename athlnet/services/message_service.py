"""Direct messaging between two members."""
from __future__ import annotations

import logging
import os
from typing import Any
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import ATTACHMENT_SUMMARY, MAX_MESSAGE_ATTACHMENT_BYTES
from ..models import Conversation, Message, User
from ..models.base import as_utc, utcnow
from .notification_service import NotificationType, add_notification
from .profile_service import get_user_or_404, resolve_display_name, user_summary
from .storage_service import StorageUploadResult, file_size, upload_file

logger = logging.getLogger(__name__)

_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".heic"}


def conversation_id_for(first: UUID, second: UUID) -> str:
    """Both orderings of the same pair map to one id."""

    return "_".join(sorted((str(first), str(second))))


def infer_message_type(content: str, media_url: str | None, requested: str | None = None) -> str:
    if requested:
        return requested
    if not media_url:
        return "text"
    suffix = os.path.splitext(media_url.split("?", 1)[0])[1].lower()
    return "image" if suffix in _IMAGE_SUFFIXES else "file"


def message_record(message: Message, sender: User | None = None) -> dict[str, Any]:
    author = sender if sender is not None else message.sender
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "recipient_id": message.recipient_id,
        "type": message.type,
        "content": message.content or "",
        "media_url": message.media_url,
        "read": bool(message.read),
        "created_at": message.created_at,
        "sender": user_summary(author) if author is not None else None,
    }


def _get_or_create_conversation(db: Session, sender_id: UUID, recipient_id: UUID) -> Conversation:
    conversation_id = conversation_id_for(sender_id, recipient_id)
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        member_a, member_b = sorted((sender_id, recipient_id), key=str)
        conversation = Conversation(id=conversation_id, member_a_id=member_a, member_b_id=member_b)
        db.add(conversation)
    return conversation


def send_message(
    db: Session,
    *,
    sender: User,
    recipient_id: UUID,
    content: str = "",
    media_url: str | None = None,
    type_: str | None = None,
) -> Message:
    """Store a message and refresh the conversation summary, creating it on first contact."""

    text = (content or "").strip()
    media = (media_url or "").strip() or None
    if not text and not media:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message needs text or an attachment")
    if sender.id == recipient_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot message yourself")
    get_user_or_404(db, recipient_id)

    conversation = _get_or_create_conversation(db, sender.id, recipient_id)
    now = utcnow()
    message = Message(
        conversation_id=conversation.id,
        sender_id=sender.id,
        recipient_id=recipient_id,
        type=infer_message_type(text, media, type_),
        content=text,
        media_url=media,
        read=False,
        created_at=now,
    )
    conversation.last_message = text or ATTACHMENT_SUMMARY
    conversation.last_message_at = now
    conversation.last_message_by = sender.id
    db.add(message)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store message in %s", conversation.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to send message") from exc

    db.refresh(message)
    add_notification(
        db,
        recipient_id=recipient_id,
        sender_id=sender.id,
        type_=NotificationType.MESSAGE_RECEIVED,
        content=f"New message from {resolve_display_name(sender)}",
        payload={"conversation_id": conversation.id, "message_id": str(message.id)},
    )
    return message


def list_conversations(db: Session, *, user: User) -> list[dict[str, Any]]:
    """Conversations the member belongs to, most recent activity first."""

    stmt = (
        select(Conversation)
        .options(selectinload(Conversation.member_a), selectinload(Conversation.member_b))
        .where(or_(Conversation.member_a_id == user.id, Conversation.member_b_id == user.id))
    )
    conversations = list(db.scalars(stmt))

    unread_rows = db.execute(
        select(Message.conversation_id, func.count())
        .where(Message.recipient_id == user.id, Message.read.is_(False))
        .group_by(Message.conversation_id)
    ).all()
    unread = {conversation_id: int(count) for conversation_id, count in unread_rows}

    def _activity(conversation: Conversation):
        return as_utc(conversation.last_message_at or conversation.created_at)

    items: list[dict[str, Any]] = []
    for conversation in sorted(conversations, key=_activity, reverse=True):
        other = conversation.member_b if conversation.member_a_id == user.id else conversation.member_a
        items.append(
            {
                "id": conversation.id,
                "members": conversation.members,
                "other_user": user_summary(other),
                "last_message": conversation.last_message,
                "last_message_at": conversation.last_message_at,
                "last_message_by": conversation.last_message_by,
                "unread_count": unread.get(conversation.id, 0),
            }
        )
    return items


def get_conversation_for_member(db: Session, *, conversation_id: str, user_id: UUID) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    if user_id not in conversation.members:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this conversation")
    return conversation


def list_conversation_messages(
    db: Session,
    *,
    viewer: User,
    other_user_id: UUID,
    limit: int = 50,
) -> dict[str, Any]:
    """The latest ``limit`` messages with ``other_user_id``, oldest first."""

    other = get_user_or_404(db, other_user_id)
    conversation_id = conversation_id_for(viewer.id, other_user_id)
    stmt = (
        select(Message)
        .options(selectinload(Message.sender))
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc())
        .limit(limit)
    )
    messages = list(db.scalars(stmt))
    messages.reverse()
    return {
        "conversation_id": conversation_id,
        "other_user": user_summary(other),
        "messages": [message_record(message) for message in messages],
    }


def mark_conversation_read(db: Session, *, viewer: User, conversation_id: str) -> int:
    """Mark everything addressed to ``viewer`` in the conversation as read."""

    get_conversation_for_member(db, conversation_id=conversation_id, user_id=viewer.id)
    stmt = (
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.recipient_id == viewer.id,
            Message.read.is_(False),
        )
        .values(read=True)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update messages") from exc
    return int(result.rowcount or 0)


async def upload_message_attachment(file: UploadFile, *, db: Session, user: User) -> StorageUploadResult:
    """Store an attachment under the sender's message folder (10 MB cap)."""

    if file_size(file) > MAX_MESSAGE_ATTACHMENT_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Attachments must be 10 MB or smaller",
        )
    return await upload_file(file, folder=f"messages/{user.id}", db=db, user_id=user.id)


__all__ = [
    "conversation_id_for",
    "infer_message_type",
    "message_record",
    "send_message",
    "list_conversations",
    "get_conversation_for_member",
    "list_conversation_messages",
    "mark_conversation_read",
    "upload_message_attachment",
]
