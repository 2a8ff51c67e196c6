"""Feed, post, like and comment API routes."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    CommentCreate,
    CommentEngagementResponse,
    CommentListResponse,
    CommentResponse,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
    TrendingResponse,
)
from ..services import (
    add_comment,
    create_post,
    delete_post,
    get_current_user,
    get_optional_user,
    list_comments,
    list_feed,
    set_comment_like_state,
    set_post_like_state,
    trending_hashtags,
    update_post,
)
from ..services.post_service import engagement_snapshot, get_post, record_share, record_view
from ..services.realtime import publish_feed_event

router = APIRouter(prefix="/posts", tags=["posts"])

logger = logging.getLogger(__name__)


async def safe_feed_broadcast(event: dict[str, Any]) -> None:
    try:
        await publish_feed_event(event)
    except (TypeError, ValueError):
        logger.exception("Could not encode feed event %s", event.get("type"))


async def broadcast_engagement_snapshot(snapshot: dict[str, Any]) -> None:
    post_id = snapshot.get("post_id")
    if not post_id:
        return
    await safe_feed_broadcast(
        {
            "type": "post_engagement_updated",
            "post_id": str(post_id),
            "like_count": int(snapshot.get("like_count") or 0),
            "comment_count": int(snapshot.get("comment_count") or 0),
            "shares": int(snapshot.get("shares") or 0),
            "views": int(snapshot.get("views") or 0),
        }
    )


@router.get("/feed", response_model=PostFeedResponse)
async def feed_endpoint(
    limit: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> PostFeedResponse:
    viewer_id = current_user.id if current_user else None
    items = list_feed(db, viewer_id=viewer_id, limit=limit)
    return PostFeedResponse(items=[PostResponse(**item) for item in items])


@router.get("/trending", response_model=TrendingResponse)
async def trending_endpoint(
    limit: int = Query(default=5, ge=1, le=20),
    db: Session = Depends(get_session),
) -> TrendingResponse:
    return TrendingResponse(items=trending_hashtags(db, limit=limit))


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = create_post(db, author=current_user, content=payload.content, media=payload.media)
    await safe_feed_broadcast(
        {
            "type": "post_created",
            "post_id": str(post["id"]),
            "user_id": str(current_user.id),
            "created_at": post["created_at"].isoformat() if post.get("created_at") else None,
        }
    )
    return PostResponse(**post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> PostResponse:
    viewer_id = current_user.id if current_user else None
    return PostResponse(**get_post(db, post_id=post_id, viewer_id=viewer_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: UUID,
    payload: PostUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = update_post(db, post_id=post_id, requester=current_user, content=payload.content, media=payload.media)
    await safe_feed_broadcast({"type": "post_updated", "post_id": str(post_id)})
    return PostResponse(**post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    delete_post(db, post_id=post_id, requester=current_user)
    await safe_feed_broadcast({"type": "post_deleted", "post_id": str(post_id)})


@router.get("/{post_id}/engagement", response_model=PostEngagementResponse)
async def engagement_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> PostEngagementResponse:
    viewer_id = current_user.id if current_user else None
    return PostEngagementResponse(**engagement_snapshot(db, post_id, viewer_id))


@router.post("/{post_id}/likes", response_model=PostEngagementResponse)
async def like_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostEngagementResponse:
    payload = set_post_like_state(db, post_id=post_id, user=current_user, should_like=True)
    await broadcast_engagement_snapshot(payload)
    return PostEngagementResponse(**payload)


@router.delete("/{post_id}/likes", response_model=PostEngagementResponse)
async def unlike_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostEngagementResponse:
    payload = set_post_like_state(db, post_id=post_id, user=current_user, should_like=False)
    await broadcast_engagement_snapshot(payload)
    return PostEngagementResponse(**payload)


@router.post("/{post_id}/views", response_model=PostEngagementResponse)
async def view_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> PostEngagementResponse:
    viewer_id = current_user.id if current_user else None
    return PostEngagementResponse(**record_view(db, post_id=post_id, viewer_id=viewer_id))


@router.post("/{post_id}/shares", response_model=PostEngagementResponse)
async def share_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostEngagementResponse:
    payload = record_share(db, post_id=post_id, viewer_id=current_user.id)
    await broadcast_engagement_snapshot(payload)
    return PostEngagementResponse(**payload)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> CommentListResponse:
    viewer_id = current_user.id if current_user else None
    items = list_comments(db, post_id=post_id, viewer_id=viewer_id)
    return CommentListResponse(items=[CommentResponse(**item) for item in items])


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentResponse:
    comment = add_comment(db, post_id=post_id, author=current_user, content=payload.content)
    snapshot = engagement_snapshot(db, post_id, current_user.id)
    await safe_feed_broadcast({"type": "post_comment_created", "post_id": str(post_id), "comment": comment})
    await broadcast_engagement_snapshot(snapshot)
    return CommentResponse(**comment)


@router.post("/{post_id}/comments/{comment_id}/likes", response_model=CommentEngagementResponse)
async def like_comment_endpoint(
    post_id: UUID,
    comment_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentEngagementResponse:
    payload = set_comment_like_state(db, post_id=post_id, comment_id=comment_id, user=current_user, should_like=True)
    return CommentEngagementResponse(**payload)


@router.delete("/{post_id}/comments/{comment_id}/likes", response_model=CommentEngagementResponse)
async def unlike_comment_endpoint(
    post_id: UUID,
    comment_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentEngagementResponse:
    payload = set_comment_like_state(db, post_id=post_id, comment_id=comment_id, user=current_user, should_like=False)
    return CommentEngagementResponse(**payload)


__all__ = ["router", "safe_feed_broadcast", "broadcast_engagement_snapshot"]
