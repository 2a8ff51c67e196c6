"""Schemas for media uploads."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class MediaUploadResponse(BaseModel):
    """Response returned after storing a file in object storage."""

    id: UUID = Field(..., description="Identifier of the persisted media asset")
    url: str = Field(..., description="Public URL of the uploaded object")
    key: str = Field(..., description="Object key inside the bucket")
    bucket: str
    content_type: str
    type: str = Field(..., description="image, video or file")


__all__ = ["MediaUploadResponse"]
