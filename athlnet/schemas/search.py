"""Schemas for search and discovery."""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .profiles import UserSummary


class UserSearchResult(UserSummary):
    title: str | None = None
    bio: str | None = None
    sports: list[str] = Field(default_factory=list)
    followers_count: int = 0
    is_following: bool = False
    score: int | None = None


class SearchResponse(BaseModel):
    query: str
    results: list[UserSearchResult]


class SuggestionResponse(BaseModel):
    items: list[UserSearchResult]


class SavedSearchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    criteria: dict[str, Any] = Field(default_factory=dict)


class SavedSearchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    criteria: dict[str, Any]
    created_at: datetime


class SavedSearchListResponse(BaseModel):
    items: list[SavedSearchResponse]


__all__ = [
    "UserSearchResult",
    "SearchResponse",
    "SuggestionResponse",
    "SavedSearchCreate",
    "SavedSearchResponse",
    "SavedSearchListResponse",
]
