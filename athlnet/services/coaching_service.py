"""Coach to athlete training requests."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import CoachingRequest, TrainingRelationship, User
from ..models.base import utcnow
from .notification_service import NotificationType, add_notification
from .profile_service import get_user_or_404, resolve_display_name, user_summary

logger = logging.getLogger(__name__)


def coaching_request_record(request: CoachingRequest) -> dict[str, Any]:
    return {
        "id": request.id,
        "coach": user_summary(request.coach),
        "athlete": user_summary(request.athlete),
        "message": request.message,
        "status": request.status,
        "created_at": request.created_at,
        "responded_at": request.responded_at,
    }


def relationship_record(relation: TrainingRelationship) -> dict[str, Any]:
    return {
        "id": relation.id,
        "coach": user_summary(relation.coach),
        "athlete": user_summary(relation.athlete),
        "status": relation.status,
        "started_at": relation.started_at,
    }


def _active_relationship(db: Session, coach_id: UUID, athlete_id: UUID) -> TrainingRelationship | None:
    return db.scalar(
        select(TrainingRelationship).where(
            TrainingRelationship.coach_id == coach_id,
            TrainingRelationship.athlete_id == athlete_id,
        )
    )


def request_to_coach(db: Session, *, coach: User, athlete_id: UUID, message: str | None = None) -> CoachingRequest:
    """Ask an athlete to train with ``coach``; one pending request per pair."""

    if (coach.role or "").lower() != "coach":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only coaches can send coaching requests")
    if coach.id == athlete_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot coach yourself")

    athlete = get_user_or_404(db, athlete_id)
    if (athlete.role or "").lower() != "athlete":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Coaching requests can only target athletes")

    if _active_relationship(db, coach.id, athlete_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already coaching this athlete")

    pending = db.scalar(
        select(CoachingRequest).where(
            CoachingRequest.coach_id == coach.id,
            CoachingRequest.athlete_id == athlete_id,
            CoachingRequest.status == "pending",
        )
    )
    if pending is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A request is already pending")

    request = CoachingRequest(
        coach_id=coach.id,
        athlete_id=athlete_id,
        message=(message or "").strip() or None,
        status="pending",
    )
    db.add(request)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store coaching request from %s", coach.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to send request") from exc

    db.refresh(request)
    add_notification(
        db,
        recipient_id=athlete_id,
        sender_id=coach.id,
        type_=NotificationType.COACHING_REQUEST,
        content=f"{resolve_display_name(coach)} wants to coach you",
        payload={"request_id": str(request.id)},
    )
    return request


def respond_to_coaching_request(db: Session, *, athlete: User, request_id: UUID, accept: bool) -> CoachingRequest:
    request = db.get(CoachingRequest, request_id)
    if request is None or request.athlete_id != athlete.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coaching request not found")
    if request.status != "pending":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Request was already answered")

    request.status = "accepted" if accept else "declined"
    request.responded_at = utcnow()
    if accept and _active_relationship(db, request.coach_id, athlete.id) is None:
        db.add(TrainingRelationship(coach_id=request.coach_id, athlete_id=athlete.id, status="active"))

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already coaching this athlete") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update request") from exc

    db.refresh(request)
    if accept:
        add_notification(
            db,
            recipient_id=request.coach_id,
            sender_id=athlete.id,
            type_=NotificationType.COACHING_ACCEPTED,
            content=f"{resolve_display_name(athlete)} accepted your coaching request",
            payload={"request_id": str(request.id)},
        )
    logger.info("Coaching request %s %s", request.id, request.status)
    return request


def list_coaching_requests(db: Session, *, athlete_id: UUID, pending_only: bool = True) -> list[CoachingRequest]:
    stmt = (
        select(CoachingRequest)
        .options(selectinload(CoachingRequest.coach), selectinload(CoachingRequest.athlete))
        .where(CoachingRequest.athlete_id == athlete_id)
        .order_by(CoachingRequest.created_at.desc())
    )
    if pending_only:
        stmt = stmt.where(CoachingRequest.status == "pending")
    return list(db.scalars(stmt))


def list_coach_athletes(db: Session, *, coach_id: UUID) -> list[TrainingRelationship]:
    stmt = (
        select(TrainingRelationship)
        .options(selectinload(TrainingRelationship.coach), selectinload(TrainingRelationship.athlete))
        .where(TrainingRelationship.coach_id == coach_id, TrainingRelationship.status == "active")
        .order_by(TrainingRelationship.started_at)
    )
    return list(db.scalars(stmt))


def list_athlete_coaches(db: Session, *, athlete_id: UUID) -> list[TrainingRelationship]:
    stmt = (
        select(TrainingRelationship)
        .options(selectinload(TrainingRelationship.coach), selectinload(TrainingRelationship.athlete))
        .where(TrainingRelationship.athlete_id == athlete_id, TrainingRelationship.status == "active")
        .order_by(TrainingRelationship.started_at)
    )
    return list(db.scalars(stmt))


__all__ = [
    "coaching_request_record",
    "relationship_record",
    "request_to_coach",
    "respond_to_coaching_request",
    "list_coaching_requests",
    "list_coach_athletes",
    "list_athlete_coaches",
]
