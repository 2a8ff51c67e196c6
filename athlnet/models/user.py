"""SQLAlchemy ORM model for AthlNet members."""
from __future__ import annotations

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from athlnet.database import Base
from .base import TimestampMixin, utcnow


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    display_name = Column(String(150), nullable=True)
    photo_url = Column(String(1024), nullable=True)
    role = Column(String(32), nullable=False, server_default="athlete", default="athlete")
    personal_info = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    privacy_settings = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    achievements = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    is_online = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    last_active_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    post_likes = relationship("PostLike", back_populates="user", cascade="all, delete-orphan")
    post_comments = relationship("PostComment", back_populates="user", cascade="all, delete-orphan")
    follower_relations = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    following_relations = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    media_assets = relationship("MediaAsset", back_populates="uploader", cascade="all, delete-orphan")
    saved_searches = relationship("SavedSearch", back_populates="user", cascade="all, delete-orphan")
    notifications_received = relationship(
        "Notification",
        foreign_keys="Notification.recipient_id",
        back_populates="recipient",
        cascade="all, delete-orphan",
    )

    @property
    def follower_ids(self) -> list[uuid.UUID]:
        return [relation.follower_id for relation in self.follower_relations]

    @property
    def following_ids(self) -> list[uuid.UUID]:
        return [relation.following_id for relation in self.following_relations]


__all__ = ["User"]
