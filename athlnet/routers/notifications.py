"""Notification API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import NotificationListResponse, NotificationResponse, NotificationsMarkedResponse
from ..services import count_unread_notifications, get_current_user, list_notifications, mark_all_read, mark_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_my_notifications(
    limit: int = Query(default=50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationListResponse:
    records = list_notifications(db, current_user.id, limit=limit)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(item) for item in records],
        unread_count=count_unread_notifications(db, current_user.id),
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationResponse:
    record = mark_read(db, recipient_id=current_user.id, notification_id=notification_id)
    return NotificationResponse.model_validate(record)


@router.post("/mark-read", response_model=NotificationsMarkedResponse)
async def mark_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationsMarkedResponse:
    return NotificationsMarkedResponse(updated=mark_all_read(db, current_user.id))


__all__ = ["router"]
