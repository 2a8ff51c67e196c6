"""Follow and unfollow members, and read follower counts and networks."""
from __future__ import annotations

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import FollowActionResponse, FollowListResponse, FollowStatsResponse
from ..services import get_current_user, get_follow_stats, get_optional_user, set_follow_state
from ..services.follow_service import list_follow_network

router = APIRouter(prefix="/follows", tags=["follows"])


def _after_follow_change(db: Session, viewer: User, target_id: UUID, *, follow: bool) -> FollowActionResponse:
    changed = set_follow_state(db, follower=viewer, target_id=target_id, should_follow=follow)
    stats = get_follow_stats(db, user_id=target_id, viewer_id=viewer.id)
    outcome = ("followed" if follow else "unfollowed") if changed else "noop"
    return FollowActionResponse(**asdict(stats), status=outcome)


@router.post("/{target_id}", response_model=FollowActionResponse, status_code=status.HTTP_201_CREATED)
async def follow_member(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    return _after_follow_change(db, current_user, target_id, follow=True)


@router.delete("/{target_id}", response_model=FollowActionResponse)
async def unfollow_member(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    return _after_follow_change(db, current_user, target_id, follow=False)


@router.get("/stats/{user_id}", response_model=FollowStatsResponse)
async def member_follow_stats(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> FollowStatsResponse:
    stats = get_follow_stats(db, user_id=user_id, viewer_id=viewer.id if viewer else None)
    return FollowStatsResponse(**asdict(stats))


@router.get("/network/{user_id}", response_model=FollowListResponse)
async def member_network(user_id: UUID, db: Session = Depends(get_session)) -> FollowListResponse:
    """Followers and followed members of ``user_id`` as summaries."""

    return FollowListResponse(**list_follow_network(db, user_id=user_id))


__all__ = ["router"]
