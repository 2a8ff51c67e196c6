"""Schemas for member profiles and the compact author summaries used elsewhere."""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserSummary(BaseModel):
    """Small author/participant card embedded in posts, messages and search results."""

    id: UUID
    display_name: str
    photo_url: str | None = None
    role: str | None = None
    primary_sport: str | None = None
    location: str | None = None
    is_online: bool = False


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None = None
    display_name: str
    photo_url: str | None = None
    role: str
    title: str | None = None
    bio: str | None = None
    location: str | None = None
    primary_sport: str | None = None
    sports: list[str] = Field(default_factory=list)
    personal_info: dict[str, Any] = Field(default_factory=dict)
    privacy_settings: dict[str, Any] = Field(default_factory=dict)
    achievements: list[dict[str, Any]] = Field(default_factory=list)
    followers: list[UUID] = Field(default_factory=list)
    following: list[UUID] = Field(default_factory=list)
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_following: bool = False
    is_own_profile: bool = False
    is_coach: bool = False
    is_online: bool = False
    created_at: datetime
    last_active_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, max_length=150)
    photo_url: str | None = None
    personal_info: dict[str, Any] | None = None
    privacy_settings: dict[str, Any] | None = None
    achievements: list[dict[str, Any]] | None = None

    @field_validator("display_name", mode="before")
    def strip_display_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


__all__ = ["UserSummary", "ProfileResponse", "ProfileUpdateRequest"]
