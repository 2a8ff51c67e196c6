"""SQLAlchemy ORM model for uploaded media."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from athlnet.database import Base
from .base import utcnow


class MediaAsset(Base):
    __tablename__ = "media_assets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    key = Column(String(1024), nullable=False, unique=True)
    url = Column(String(2048), nullable=False)
    bucket = Column(String(255), nullable=False)
    content_type = Column(String(255), nullable=False)
    folder = Column(String(255), nullable=True)
    size_bytes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    uploader = relationship("User", back_populates="media_assets")


__all__ = ["MediaAsset"]
