"""Notification helpers for in-app alerts."""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Notification, User

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    GENERIC = "generic"
    NEW_FOLLOWER = "follow.new"
    POST_LIKE = "post.like"
    POST_COMMENT = "post.comment"
    MESSAGE_RECEIVED = "message.received"
    COACHING_REQUEST = "coaching.request"
    COACHING_ACCEPTED = "coaching.accepted"


def list_notifications(db: Session, user_id: UUID, *, limit: int = 50) -> list[Notification]:
    """Return notifications for the supplied recipient ordered newest first."""

    stmt = (
        select(Notification)
        .where(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


def count_unread_notifications(db: Session, user_id: UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def add_notification(
    db: Session,
    *,
    recipient_id: UUID,
    sender_id: UUID,
    content: str,
    type_: NotificationType | str = NotificationType.GENERIC,
    payload: dict[str, Any] | None = None,
) -> Notification | None:
    """Persist a notification; self-notifications are skipped and return ``None``."""

    if recipient_id == sender_id:
        return None

    if db.get(User, recipient_id) is None:
        raise ValueError("Recipient does not exist")

    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=str(type_),
        content=content,
        payload=payload,
    )
    db.add(notification)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store %s notification for %s", type_, recipient_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to record notification",
        ) from exc
    db.refresh(notification)
    return notification


def mark_read(db: Session, *, recipient_id: UUID, notification_id: UUID) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None or notification.recipient_id != recipient_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    notification.read = True
    db.commit()
    return notification


def mark_all_read(db: Session, recipient_id: UUID) -> int:
    """Mark all notifications for the given recipient as read."""

    stmt = (
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.read.is_(False))
        .values(read=True)
    )
    result = db.execute(stmt)
    db.commit()
    return int(result.rowcount or 0)


__all__ = [
    "NotificationType",
    "list_notifications",
    "count_unread_notifications",
    "add_notification",
    "mark_read",
    "mark_all_read",
]
