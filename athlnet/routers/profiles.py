"""Profile API routes."""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    MediaUploadResponse,
    PostFeedResponse,
    PostResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from ..services import get_current_user, get_optional_user, get_profile, update_profile
from ..services.post_service import list_user_posts
from ..services.profile_service import upload_profile_image
from .uploads import await_upload, upload_response

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def retrieve_my_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    return ProfileResponse(**get_profile(db, user_id=current_user.id, viewer_id=current_user.id))


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    user_id = cast(UUID, current_user.id)
    update_profile(db, user_id=user_id, payload=payload)
    return ProfileResponse(**get_profile(db, user_id=user_id, viewer_id=user_id))


@router.post("/me/photo", response_model=MediaUploadResponse)
async def upload_my_photo(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MediaUploadResponse:
    result = await await_upload(upload_profile_image(file, db=db, user=current_user))
    return upload_response(result)


@router.get("/{user_id}", response_model=ProfileResponse)
async def retrieve_profile(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ProfileResponse:
    viewer_id = cast(UUID, viewer.id) if viewer else None
    return ProfileResponse(**get_profile(db, user_id=user_id, viewer_id=viewer_id))


@router.get("/{user_id}/posts", response_model=PostFeedResponse)
async def list_profile_posts(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> PostFeedResponse:
    viewer_id = cast(UUID, viewer.id) if viewer else None
    items = list_user_posts(db, author_id=user_id, viewer_id=viewer_id)
    return PostFeedResponse(items=[PostResponse(**item) for item in items])


__all__ = ["router"]
