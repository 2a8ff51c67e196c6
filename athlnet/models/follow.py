"""Directed follow edges between members."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from athlnet.database import Base
from .base import utcnow


class Follow(Base):
    """``follower`` follows ``following``; the pair is the primary key so an edge exists at most once."""

    __tablename__ = "follows"

    follower_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    following_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    # connection growth on the dashboard is counted from this timestamp
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following_relations")
    following = relationship("User", foreign_keys=[following_id], back_populates="follower_relations")

    __table_args__ = (Index("ix_follows_following_created", "following_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Follow {self.follower_id} -> {self.following_id}>"


__all__ = ["Follow"]
