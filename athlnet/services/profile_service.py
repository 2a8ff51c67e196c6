"""Profile lookups, name resolution and profile edits."""
from __future__ import annotations

import re
from typing import Any
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import DEFAULT_DISPLAY_NAME, MAX_PROFILE_SPORTS
from ..models import Follow, Post, User
from ..schemas import ProfileUpdateRequest
from .storage_service import StorageUploadResult, upload_file

# Opaque identifiers sometimes end up stored as a name; never show them.
_OPAQUE_ID = re.compile(r"^[A-Za-z0-9]{20,}$")


def _usable_name(candidate: str | None, user_id: UUID | None) -> str | None:
    if not candidate:
        return None
    name = candidate.strip()
    if not name or len(name) >= 50:
        return None
    if user_id is not None and name == str(user_id):
        return None
    if _OPAQUE_ID.match(name):
        return None
    return name


def resolve_display_name(user: User) -> str:
    """Pick the best human-readable name for ``user``."""

    explicit = _usable_name(user.display_name, user.id)
    if explicit:
        return explicit

    info = user.personal_info or {}
    first = (info.get("first_name") or "").strip()
    last = (info.get("last_name") or "").strip()
    if first and last:
        return f"{first} {last}"
    if first or last:
        return first or last

    email = user.email or ""
    if "@" in email:
        return email.split("@", 1)[0]
    return DEFAULT_DISPLAY_NAME


def profile_location(info: dict[str, Any] | None) -> str | None:
    info = info or {}
    location = (info.get("location") or "").strip()
    if location:
        return location
    parts = [(info.get(key) or "").strip() for key in ("city", "country")]
    joined = ", ".join(part for part in parts if part)
    return joined or None


def profile_sports(info: dict[str, Any] | None) -> list[str]:
    """Primary sport first, then the remaining sports without duplicates."""

    info = info or {}
    ordered: list[str] = []
    for sport in [info.get("primary_sport"), *(info.get("sports") or [])]:
        if not sport:
            continue
        cleaned = str(sport).strip()
        if cleaned and cleaned.lower() not in {existing.lower() for existing in ordered}:
            ordered.append(cleaned)
    return ordered[:MAX_PROFILE_SPORTS]


def user_summary(user: User) -> dict[str, Any]:
    info = user.personal_info or {}
    sports = profile_sports(info)
    return {
        "id": user.id,
        "display_name": resolve_display_name(user),
        "photo_url": user.photo_url,
        "role": user.role,
        "primary_sport": sports[0] if sports else None,
        "location": profile_location(info),
        "is_online": bool(user.is_online),
    }


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == (email or "").strip().lower()))


def get_profile(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> dict[str, Any]:
    """Return the cleaned profile for ``user_id`` as seen by ``viewer_id``."""

    user = get_user_or_404(db, user_id)
    info = dict(user.personal_info or {})
    sports = profile_sports(info)

    followers = list(db.scalars(select(Follow.follower_id).where(Follow.following_id == user.id)))
    following = list(db.scalars(select(Follow.following_id).where(Follow.follower_id == user.id)))
    posts_count = db.scalar(select(func.count()).select_from(Post).where(Post.author_id == user.id)) or 0
    is_own = viewer_id is not None and viewer_id == user.id

    return {
        "id": user.id,
        "email": user.email if is_own else None,
        "display_name": resolve_display_name(user),
        "photo_url": user.photo_url,
        "role": user.role,
        "title": info.get("title"),
        "bio": info.get("bio"),
        "location": profile_location(info),
        "primary_sport": sports[0] if sports else None,
        "sports": sports,
        "personal_info": info,
        "privacy_settings": dict(user.privacy_settings or {}),
        "achievements": list(user.achievements or []),
        "followers": followers,
        "following": following,
        "followers_count": len(followers),
        "following_count": len(following),
        "posts_count": int(posts_count),
        "is_following": viewer_id is not None and viewer_id in followers,
        "is_own_profile": is_own,
        "is_coach": user.role == "coach",
        "is_online": bool(user.is_online),
        "created_at": user.created_at,
        "last_active_at": user.last_active_at,
    }


def update_profile(db: Session, *, user_id: UUID, payload: ProfileUpdateRequest) -> User:
    """Apply profile updates for the supplied ``user_id``."""

    user = get_user_or_404(db, user_id)
    update_data = payload.model_dump(exclude_unset=True)

    # An empty photo URL never clears the current picture.
    photo = update_data.pop("photo_url", None)
    if photo not in (None, "", "None"):
        user.photo_url = str(photo)

    if "display_name" in update_data:
        user.display_name = update_data["display_name"]

    # JSON columns are replaced, not mutated, so the change is tracked.
    if update_data.get("personal_info") is not None:
        merged = dict(user.personal_info or {})
        merged.update(update_data["personal_info"])
        user.personal_info = merged
    if update_data.get("privacy_settings") is not None:
        merged = dict(user.privacy_settings or {})
        merged.update(update_data["privacy_settings"])
        user.privacy_settings = merged
    if update_data.get("achievements") is not None:
        user.achievements = list(update_data["achievements"])

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        ) from exc

    db.refresh(user)
    return user


async def upload_profile_image(file: UploadFile, *, db: Session, user: User) -> StorageUploadResult:
    """Store a new profile picture under ``profiles/<uid>`` and make it the current photo."""

    result = await upload_file(file, folder=f"profiles/{user.id}", db=db, user_id=user.id)
    update_profile(db, user_id=user.id, payload=ProfileUpdateRequest(photo_url=result.url))
    return result


def set_presence(db: Session, user: User, *, online: bool) -> None:
    user.is_online = online
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update presence",
        ) from exc


__all__ = [
    "resolve_display_name",
    "profile_location",
    "profile_sports",
    "user_summary",
    "get_user_or_404",
    "get_user_by_email",
    "get_profile",
    "update_profile",
    "upload_profile_image",
    "set_presence",
]
