"""Coaching request API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    CoachingDecision,
    CoachingRequestCreate,
    CoachingRequestResponse,
    TrainingRelationshipResponse,
)
from ..services import (
    get_current_user,
    list_coach_athletes,
    list_coaching_requests,
    request_to_coach,
    require_roles,
    respond_to_coaching_request,
)
from ..services.coaching_service import coaching_request_record, list_athlete_coaches, relationship_record

router = APIRouter(prefix="/coaching", tags=["coaching"])


@router.post("/requests", response_model=CoachingRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request_endpoint(
    payload: CoachingRequestCreate,
    db: Session = Depends(get_session),
    coach: User = Depends(require_roles("coach")),
) -> CoachingRequestResponse:
    request = request_to_coach(db, coach=coach, athlete_id=payload.athlete_id, message=payload.message)
    return CoachingRequestResponse(**coaching_request_record(request))


@router.get("/requests", response_model=list[CoachingRequestResponse])
async def list_requests_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[CoachingRequestResponse]:
    requests = list_coaching_requests(db, athlete_id=current_user.id)
    return [CoachingRequestResponse(**coaching_request_record(item)) for item in requests]


@router.post("/requests/{request_id}/respond", response_model=CoachingRequestResponse)
async def respond_endpoint(
    request_id: UUID,
    payload: CoachingDecision,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CoachingRequestResponse:
    request = respond_to_coaching_request(db, athlete=current_user, request_id=request_id, accept=payload.accept)
    return CoachingRequestResponse(**coaching_request_record(request))


@router.get("/athletes", response_model=list[TrainingRelationshipResponse])
async def my_athletes_endpoint(
    db: Session = Depends(get_session),
    coach: User = Depends(require_roles("coach")),
) -> list[TrainingRelationshipResponse]:
    return [TrainingRelationshipResponse(**relationship_record(item)) for item in list_coach_athletes(db, coach_id=coach.id)]


@router.get("/coaches", response_model=list[TrainingRelationshipResponse])
async def my_coaches_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[TrainingRelationshipResponse]:
    relations = list_athlete_coaches(db, athlete_id=current_user.id)
    return [TrainingRelationshipResponse(**relationship_record(item)) for item in relations]


__all__ = ["router"]
