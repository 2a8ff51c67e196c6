"""SQLAlchemy ORM models for coach/athlete relationships."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from athlnet.database import Base
from .base import TimestampMixin, utcnow


class CoachingRequest(TimestampMixin, Base):
    __tablename__ = "coaching_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    coach_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="pending", server_default="pending")
    responded_at = Column(DateTime(timezone=True), nullable=True)

    coach = relationship("User", foreign_keys=[coach_id])
    athlete = relationship("User", foreign_keys=[athlete_id])


class TrainingRelationship(Base):
    __tablename__ = "training_relationships"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    coach_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(16), nullable=False, default="active", server_default="active")
    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    coach = relationship("User", foreign_keys=[coach_id])
    athlete = relationship("User", foreign_keys=[athlete_id])

    __table_args__ = (UniqueConstraint("coach_id", "athlete_id", name="uq_training_coach_athlete"),)


__all__ = ["CoachingRequest", "TrainingRelationship"]
