"""Standalone upload endpoint backed by S3-compatible object storage."""
from __future__ import annotations

from typing import Awaitable

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import MediaUploadResponse
from ..services import StorageConfigurationError, StorageUploadError, get_current_user, upload_file
from ..services.storage_service import StorageUploadResult

router = APIRouter(tags=["uploads"])


async def await_upload(pending: Awaitable[StorageUploadResult]) -> StorageUploadResult:
    """Translate storage failures into 503 (not configured) and 502 (upstream failure)."""

    try:
        return await pending
    except StorageConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except StorageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


def upload_response(result: StorageUploadResult) -> MediaUploadResponse:
    if result.asset_id is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist media metadata")
    return MediaUploadResponse(
        id=result.asset_id,
        url=result.url,
        key=result.key,
        bucket=result.bucket,
        content_type=result.content_type,
        type=result.media_type,
    )


@router.post("/upload/", response_model=MediaUploadResponse)
async def upload_endpoint(
    file: UploadFile = File(...),
    folder: str = "uploads",
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MediaUploadResponse:
    """Store a post image or video and return its public URL."""

    if not (file.filename or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file must include a filename.")

    target = f"{folder.strip('/') or 'uploads'}/{current_user.id}"
    result = await await_upload(upload_file(file, folder=target, db=db, user_id=current_user.id))
    return upload_response(result)


__all__ = ["router", "await_upload", "upload_response"]
