"""Business logic for follower relationships."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Follow, User
from .notification_service import NotificationType, add_notification
from .profile_service import get_user_or_404, resolve_display_name, user_summary

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def follow_user(db: Session, *, follower: User, target_id: UUID) -> bool:
    """Record ``follower -> target``; returns ``False`` when it already existed."""

    if follower.id == target_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")

    get_user_or_404(db, target_id)

    existing = db.get(Follow, (follower.id, target_id))
    if existing is not None:
        return False

    db.add(Follow(follower_id=follower.id, following_id=target_id))
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with an identical follow.
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to follow user") from exc

    add_notification(
        db,
        recipient_id=target_id,
        sender_id=follower.id,
        type_=NotificationType.NEW_FOLLOWER,
        content=f"{resolve_display_name(follower)} started following you",
        payload={"follower_id": str(follower.id)},
    )
    return True


def unfollow_user(db: Session, *, follower: User, target_id: UUID) -> bool:
    if follower.id == target_id:
        return False

    record = db.get(Follow, (follower.id, target_id))
    if record is None:
        return False
    try:
        db.delete(record)
        db.commit()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to unfollow user") from exc


def set_follow_state(db: Session, *, follower: User, target_id: UUID, should_follow: bool) -> bool:
    if should_follow:
        return follow_user(db, follower=follower, target_id=target_id)
    return unfollow_user(db, follower=follower, target_id=target_id)


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    get_user_or_404(db, user_id)

    followers_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    ) or 0
    following_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    ) or 0

    is_following = False
    if viewer_id is not None:
        is_following = db.get(Follow, (viewer_id, user_id)) is not None

    return FollowStats(
        user_id=user_id,
        followers_count=int(followers_count),
        following_count=int(following_count),
        is_following=is_following,
    )


def list_follow_network(db: Session, *, user_id: UUID) -> dict[str, Any]:
    """Both sides of a member's network as summaries."""

    get_user_or_404(db, user_id)
    followers = db.scalars(
        select(User).join(Follow, Follow.follower_id == User.id).where(Follow.following_id == user_id)
    ).all()
    following = db.scalars(
        select(User).join(Follow, Follow.following_id == User.id).where(Follow.follower_id == user_id)
    ).all()
    return {
        "user_id": user_id,
        "followers": [user_summary(user) for user in followers],
        "following": [user_summary(user) for user in following],
    }


__all__ = [
    "FollowStats",
    "follow_user",
    "unfollow_user",
    "set_follow_state",
    "get_follow_stats",
    "list_follow_network",
]
