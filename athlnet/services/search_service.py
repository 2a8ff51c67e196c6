"""Member search, suggestions and saved searches."""
from __future__ import annotations

import logging
from typing import Any, Iterable
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import MIN_SEARCH_CHARS
from ..models import Follow, SavedSearch, User
from .profile_service import profile_location, profile_sports, resolve_display_name, user_summary

logger = logging.getLogger(__name__)


def _candidates(db: Session) -> list[User]:
    # JSON profile fields are not portably searchable in SQL, so matching happens here.
    limit = get_settings().search_candidate_limit
    return list(db.scalars(select(User).order_by(User.created_at).limit(limit)))


def _follower_counts(db: Session, user_ids: Iterable[UUID]) -> dict[UUID, int]:
    ids = list(user_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(Follow.following_id, func.count())
        .where(Follow.following_id.in_(ids))
        .group_by(Follow.following_id)
    ).all()
    return {user_id: int(count) for user_id, count in rows}


def _following_ids(db: Session, viewer_id: UUID | None) -> set[UUID]:
    if viewer_id is None:
        return set()
    return set(db.scalars(select(Follow.following_id).where(Follow.follower_id == viewer_id)))


def searchable_text(user: User) -> str:
    """Name, title, primary sport, location and sports as one lowercase string."""

    info = user.personal_info or {}
    parts = [
        resolve_display_name(user),
        info.get("title") or "",
        info.get("primary_sport") or "",
        profile_location(info) or "",
        *[str(sport) for sport in info.get("sports") or []],
    ]
    return " ".join(parts).lower()


def _matches_filters(user: User, filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    info = user.personal_info or {}

    role = (filters.get("role") or "").strip().lower()
    if role and (user.role or "").lower() != role:
        return False

    sport = (filters.get("sport") or "").strip().lower()
    if sport and not any(sport in item.lower() for item in profile_sports(info)):
        return False

    location = (filters.get("location") or "").strip().lower()
    if location and location not in (profile_location(info) or "").lower():
        return False
    return True


def search_result(
    user: User,
    *,
    followers_count: int = 0,
    is_following: bool = False,
    score: int | None = None,
) -> dict[str, Any]:
    info = user.personal_info or {}
    record = user_summary(user)
    record.update(
        {
            "title": info.get("title"),
            "bio": info.get("bio"),
            "sports": profile_sports(info),
            "followers_count": followers_count,
            "is_following": is_following,
            "score": score,
        }
    )
    return record


def search_users(
    db: Session,
    term: str | None,
    *,
    viewer_id: UUID | None = None,
    filters: dict[str, Any] | None = None,
    limit: int = 20,
) -> list[dict[str, Any]]:
    """Case-insensitive member search; terms under two characters return nothing."""

    needle = (term or "").strip().lower()
    if len(needle) < MIN_SEARCH_CHARS:
        return []

    matches: list[tuple[bool, str, User]] = []
    for user in _candidates(db):
        if not _matches_filters(user, filters):
            continue
        if needle not in searchable_text(user):
            continue
        name = resolve_display_name(user)
        matches.append((needle in name.lower(), name.lower(), user))

    # Name matches first, then alphabetical.
    matches.sort(key=lambda item: (not item[0], item[1]))
    selected = [user for _, _, user in matches[:limit]]

    counts = _follower_counts(db, (user.id for user in selected))
    following = _following_ids(db, viewer_id)
    return [
        search_result(user, followers_count=counts.get(user.id, 0), is_following=user.id in following)
        for user in selected
    ]


def suggested_users(db: Session, *, viewer: User, limit: int = 12) -> list[dict[str, Any]]:
    """Members the viewer does not follow yet, ranked by shared sports and location."""

    following = _following_ids(db, viewer.id)
    viewer_info = viewer.personal_info or {}
    viewer_sports = {sport.lower() for sport in profile_sports(viewer_info)}
    viewer_location = (profile_location(viewer_info) or "").lower()

    scored: list[tuple[int, str, User]] = []
    for user in _candidates(db):
        if user.id == viewer.id or user.id in following:
            continue
        info = user.personal_info or {}
        common = viewer_sports & {sport.lower() for sport in profile_sports(info)}
        score = 2 * len(common)
        location = (profile_location(info) or "").lower()
        if viewer_location and location == viewer_location:
            score += 3
        scored.append((score, resolve_display_name(user).lower(), user))

    scored.sort(key=lambda item: (-item[0], item[1]))
    selected = scored[:limit]
    counts = _follower_counts(db, (user.id for _, _, user in selected))
    return [search_result(user, followers_count=counts.get(user.id, 0), score=score) for score, _, user in selected]


def users_by_sport(db: Session, sport: str, *, limit: int = 20) -> list[dict[str, Any]]:
    needle = (sport or "").strip().lower()
    if not needle:
        return []
    found = [
        user
        for user in _candidates(db)
        if any(needle in item.lower() for item in profile_sports(user.personal_info))
    ]
    found.sort(key=lambda user: resolve_display_name(user).lower())
    selected = found[:limit]
    counts = _follower_counts(db, (user.id for user in selected))
    return [search_result(user, followers_count=counts.get(user.id, 0)) for user in selected]


def list_saved_searches(db: Session, *, user_id: UUID) -> list[SavedSearch]:
    stmt = select(SavedSearch).where(SavedSearch.user_id == user_id).order_by(SavedSearch.created_at.desc())
    return list(db.scalars(stmt))


def create_saved_search(db: Session, *, user_id: UUID, name: str, criteria: dict[str, Any]) -> SavedSearch:
    label = (name or "").strip()
    if not label:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Saved search needs a name")

    saved = SavedSearch(user_id=user_id, name=label, criteria=dict(criteria or {}))
    db.add(saved)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save search for %s", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to save search") from exc
    db.refresh(saved)
    return saved


def delete_saved_search(db: Session, *, user_id: UUID, search_id: UUID) -> None:
    saved = db.get(SavedSearch, search_id)
    if saved is None or saved.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Saved search not found")
    try:
        db.delete(saved)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to delete search") from exc


__all__ = [
    "searchable_text",
    "search_result",
    "search_users",
    "suggested_users",
    "users_by_sport",
    "list_saved_searches",
    "create_saved_search",
    "delete_saved_search",
]
