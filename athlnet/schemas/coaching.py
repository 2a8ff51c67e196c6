"""Schemas for coaching requests and training relationships."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .profiles import UserSummary


class CoachingRequestCreate(BaseModel):
    athlete_id: UUID
    message: str | None = Field(default=None, max_length=1000)


class CoachingDecision(BaseModel):
    accept: bool


class CoachingRequestResponse(BaseModel):
    id: UUID
    coach: UserSummary
    athlete: UserSummary
    message: str | None = None
    status: Literal["pending", "accepted", "declined"]
    created_at: datetime
    responded_at: datetime | None = None


class TrainingRelationshipResponse(BaseModel):
    id: UUID
    coach: UserSummary
    athlete: UserSummary
    status: str
    started_at: datetime


__all__ = [
    "CoachingRequestCreate",
    "CoachingDecision",
    "CoachingRequestResponse",
    "TrainingRelationshipResponse",
]
