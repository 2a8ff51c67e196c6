"""Pydantic schemas for feed posts, likes and comments."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .profiles import UserSummary


class MediaItem(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)
    type: Literal["image", "video"] = "image"


class PostCreate(BaseModel):
    content: str = Field(default="", max_length=5000)
    media: list[MediaItem] = Field(default_factory=list, max_length=10)

    @model_validator(mode="after")
    def require_content_or_media(self):
        if not self.content.strip() and not self.media:
            raise ValueError("A post needs text or at least one media item")
        return self


class PostUpdate(BaseModel):
    """Only the text and the media list of a post can be edited."""

    content: str | None = Field(default=None, max_length=5000)
    media: list[MediaItem] | None = None


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    author: UserSummary
    content: str
    likes: list[UUID] = Field(default_factory=list)
    like_count: int = 0
    viewer_has_liked: bool = False
    created_at: datetime


class PostResponse(BaseModel):
    id: UUID
    author_id: UUID
    author: UserSummary
    content: str
    media: list[MediaItem] = Field(default_factory=list)
    likes: list[UUID] = Field(default_factory=list)
    like_count: int = 0
    comments: list[CommentResponse] = Field(default_factory=list)
    comment_count: int = 0
    shares: int = 0
    views: int = 0
    viewer_has_liked: bool = False
    created_at: datetime
    updated_at: datetime | None = None


class PostFeedResponse(BaseModel):
    items: list[PostResponse]


class PostEngagementResponse(BaseModel):
    """Counters used to reconcile optimistic like state."""

    post_id: UUID
    likes: list[UUID]
    like_count: int
    comment_count: int
    shares: int = 0
    views: int = 0
    viewer_has_liked: bool


class CommentEngagementResponse(BaseModel):
    comment_id: UUID
    post_id: UUID
    likes: list[UUID]
    like_count: int
    viewer_has_liked: bool


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


class TrendingHashtag(BaseModel):
    tag: str
    posts: int


class TrendingResponse(BaseModel):
    items: list[TrendingHashtag]


__all__ = [
    "MediaItem",
    "PostCreate",
    "PostUpdate",
    "CommentCreate",
    "CommentResponse",
    "PostResponse",
    "PostFeedResponse",
    "PostEngagementResponse",
    "CommentEngagementResponse",
    "CommentListResponse",
    "TrendingHashtag",
    "TrendingResponse",
]
