"""Business logic for feed posts, likes and comments."""
from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any, Iterable
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..config import get_settings
from ..models import CommentLike, Post, PostComment, PostLike, User
from .notification_service import NotificationType, add_notification
from .profile_service import get_user_or_404, resolve_display_name, user_summary

logger = logging.getLogger(__name__)

_HASHTAG = re.compile(r"#\w+")
# trending tags are counted over this many of the newest posts
TRENDING_WINDOW = 100
TRENDING_LIMIT = 5


def _post_query():
    return select(Post).options(
        selectinload(Post.author),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(PostComment.user),
        selectinload(Post.comments).selectinload(PostComment.likes),
    )


def _comment_record(comment: PostComment, viewer_id: UUID | None) -> dict[str, Any]:
    likes = [like.user_id for like in comment.likes]
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "user_id": comment.user_id,
        "author": user_summary(comment.user),
        "content": comment.content,
        "likes": likes,
        "like_count": len(likes),
        "viewer_has_liked": viewer_id is not None and viewer_id in likes,
        "created_at": comment.created_at,
    }


def post_record(post: Post, viewer_id: UUID | None = None) -> dict[str, Any]:
    """Flatten ``post`` into the shape the API and pages render."""

    likes = [like.user_id for like in post.likes]
    comments = [_comment_record(comment, viewer_id) for comment in post.comments]
    return {
        "id": post.id,
        "author_id": post.author_id,
        "author": user_summary(post.author),
        "content": post.content or "",
        "media": list(post.media or []),
        "likes": likes,
        "like_count": len(likes),
        "comments": comments,
        "comment_count": len(comments),
        "shares": int(post.shares or 0),
        "views": int(post.views or 0),
        "viewer_has_liked": viewer_id is not None and viewer_id in likes,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def _get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.scalar(_post_query().where(Post.id == post_id))
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _normalize_media(media: Iterable[Any] | None) -> list[dict[str, str]]:
    items: list[dict[str, str]] = []
    for item in media or ():
        data = item.model_dump() if hasattr(item, "model_dump") else dict(item)
        url = (data.get("url") or "").strip()
        if not url:
            continue
        media_type = data.get("type") if data.get("type") in {"image", "video"} else "image"
        items.append({"url": url, "type": media_type})
    return items


def list_feed(
    db: Session,
    *,
    viewer_id: UUID | None = None,
    author_id: UUID | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Newest posts first, optionally restricted to one author."""

    stmt = _post_query().order_by(Post.created_at.desc())
    if author_id is not None:
        stmt = stmt.where(Post.author_id == author_id)
    stmt = stmt.limit(limit or get_settings().feed_page_size)
    return [post_record(post, viewer_id) for post in db.scalars(stmt).unique()]


def list_user_posts(
    db: Session,
    *,
    author_id: UUID,
    viewer_id: UUID | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    get_user_or_404(db, author_id)
    return list_feed(db, viewer_id=viewer_id, author_id=author_id, limit=limit)


def get_post(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> dict[str, Any]:
    return post_record(_get_post_or_404(db, post_id), viewer_id)


def create_post(db: Session, *, author: User, content: str, media: Iterable[Any] | None = None) -> dict[str, Any]:
    text = (content or "").strip()
    items = _normalize_media(media)
    if not text and not items:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="A post needs text or media")

    post = Post(author_id=author.id, content=text, media=items, shares=0, views=0)
    db.add(post)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create post") from exc

    logger.info("Post %s created by %s", post.id, author.id)
    return get_post(db, post_id=post.id, viewer_id=author.id)


def update_post(
    db: Session,
    *,
    post_id: UUID,
    requester: User,
    content: str | None = None,
    media: Iterable[Any] | None = None,
) -> dict[str, Any]:
    """Edit the text and/or media of a post. Only the author may edit."""

    post = _get_post_or_404(db, post_id)
    if post.author_id != requester.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to edit this post")

    next_content = post.content if content is None else content.strip()
    next_media = list(post.media or []) if media is None else _normalize_media(media)
    if not next_content and not next_media:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="A post needs text or media")

    post.content = next_content
    post.media = next_media
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update post") from exc

    db.refresh(post)
    return post_record(post, requester.id)


def delete_post(db: Session, *, post_id: UUID, requester: User) -> None:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    if post.author_id != requester.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to delete this post")
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete post") from exc


def engagement_snapshot(db: Session, post_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    record = get_post(db, post_id=post_id, viewer_id=viewer_id)
    return {
        "post_id": record["id"],
        "likes": record["likes"],
        "like_count": record["like_count"],
        "comment_count": record["comment_count"],
        "shares": record["shares"],
        "views": record["views"],
        "viewer_has_liked": record["viewer_has_liked"],
    }


def set_post_like_state(db: Session, *, post_id: UUID, user: User, should_like: bool) -> dict[str, Any]:
    """Idempotently like or unlike; returns the post's engagement snapshot."""

    post = _get_post_or_404(db, post_id)
    existing = db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user.id))

    created = False
    if should_like and existing is None:
        db.add(PostLike(post_id=post_id, user_id=user.id))
        created = True
    elif not should_like and existing is not None:
        db.delete(existing)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request already stored this like.
        db.rollback()
        created = False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    if created:
        add_notification(
            db,
            recipient_id=post.author_id,
            sender_id=user.id,
            type_=NotificationType.POST_LIKE,
            content=f"{resolve_display_name(user)} liked your post",
            payload={"post_id": str(post_id)},
        )

    db.expire_all()
    return engagement_snapshot(db, post_id, user.id)


def list_comments(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> list[dict[str, Any]]:
    return get_post(db, post_id=post_id, viewer_id=viewer_id)["comments"]


def add_comment(db: Session, *, post_id: UUID, author: User, content: str) -> dict[str, Any]:
    post = _get_post_or_404(db, post_id)
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Comment cannot be empty")

    comment = PostComment(post_id=post.id, user_id=author.id, content=text)
    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc

    add_notification(
        db,
        recipient_id=post.author_id,
        sender_id=author.id,
        type_=NotificationType.POST_COMMENT,
        content=f"{resolve_display_name(author)} commented on your post",
        payload={"post_id": str(post.id), "comment_id": str(comment.id)},
    )

    db.refresh(comment)
    return _comment_record(comment, author.id)


def set_comment_like_state(
    db: Session,
    *,
    post_id: UUID,
    comment_id: UUID,
    user: User,
    should_like: bool,
) -> dict[str, Any]:
    comment = db.get(PostComment, comment_id)
    if comment is None or comment.post_id != post_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    existing = db.scalar(
        select(CommentLike).where(CommentLike.comment_id == comment_id, CommentLike.user_id == user.id)
    )
    if should_like and existing is None:
        db.add(CommentLike(comment_id=comment_id, user_id=user.id))
    elif not should_like and existing is not None:
        db.delete(existing)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    likes = list(db.scalars(select(CommentLike.user_id).where(CommentLike.comment_id == comment_id)))
    return {
        "comment_id": comment_id,
        "post_id": post_id,
        "likes": likes,
        "like_count": len(likes),
        "viewer_has_liked": user.id in likes,
    }


def _bump_counter(db: Session, post_id: UUID, column) -> None:
    _get_post_or_404(db, post_id)
    try:
        db.execute(update(Post).where(Post.id == post_id).values({column: column + 1}))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update post") from exc
    db.expire_all()


def record_view(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> dict[str, Any]:
    _bump_counter(db, post_id, Post.views)
    return engagement_snapshot(db, post_id, viewer_id)


def record_share(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> dict[str, Any]:
    _bump_counter(db, post_id, Post.shares)
    return engagement_snapshot(db, post_id, viewer_id)


def trending_hashtags(db: Session, *, limit: int = TRENDING_LIMIT) -> list[dict[str, Any]]:
    """Most used ``#tags`` across the latest posts, each counted once per post.

    Ties are ordered alphabetically.
    """

    contents = db.scalars(select(Post.content).order_by(Post.created_at.desc()).limit(TRENDING_WINDOW))
    counts: Counter[str] = Counter()
    for content in contents:
        counts.update({tag.lower() for tag in _HASHTAG.findall(content or "")})
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"tag": tag, "posts": posts} for tag, posts in ranked[:limit]]


__all__ = [
    "post_record",
    "list_feed",
    "list_user_posts",
    "get_post",
    "create_post",
    "update_post",
    "delete_post",
    "engagement_snapshot",
    "set_post_like_state",
    "list_comments",
    "add_comment",
    "set_comment_like_state",
    "record_view",
    "record_share",
    "trending_hashtags",
]
