"""Home feed page with the composer, like toggles and comments."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from athlnet.database import get_session
from athlnet.models import User
from athlnet.routers.posts import broadcast_engagement_snapshot, safe_feed_broadcast
from athlnet.routers.uploads import await_upload
from athlnet.services import (
    add_comment,
    count_unread_notifications,
    create_post,
    list_feed,
    list_notifications,
    set_post_like_state,
    suggested_users,
    trending_hashtags,
    upload_file,
)
from athlnet.services.profile_service import user_summary

from ..guards import require_page_user
from ..template_helpers import render_template

router = APIRouter()

FEED_PATH = "/home-feed"
RECENT_NOTIFICATIONS = 5


def _back_to_feed() -> RedirectResponse:
    return RedirectResponse(FEED_PATH, status_code=status.HTTP_303_SEE_OTHER)


def _feed_page(
    request: Request,
    db: Session,
    user: User,
    *,
    error: str | None = None,
    draft: str = "",
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return render_template(
        request,
        "home_feed.html",
        {
            "page_title": "Home",
            "active_nav": FEED_PATH,
            "viewer": user_summary(user),
            "posts": list_feed(db, viewer_id=user.id),
            "suggestions": suggested_users(db, viewer=user, limit=5),
            "unread_notifications": count_unread_notifications(db, user.id),
            "recent_notifications": list_notifications(db, user.id, limit=RECENT_NOTIFICATIONS),
            "trending": trending_hashtags(db),
            "error": error,
            "draft": draft,
        },
        status_code=status_code,
    )


@router.get(FEED_PATH, response_class=HTMLResponse)
async def home_feed(
    request: Request,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    return _feed_page(request, db, user)


@router.post(f"{FEED_PATH}/posts", response_class=HTMLResponse)
async def publish_post(
    request: Request,
    content: str = Form(""),
    media: UploadFile | None = File(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
):
    items = []
    try:
        if media is not None and (media.filename or "").strip():
            uploaded = await await_upload(upload_file(media, folder=f"posts/{user.id}", db=db, user_id=user.id))
            items.append({"url": uploaded.url, "type": uploaded.media_type})
        post = create_post(db, author=user, content=content, media=items)
    except HTTPException as exc:
        return _feed_page(request, db, user, error=str(exc.detail), draft=content, status_code=exc.status_code)

    await safe_feed_broadcast({"type": "post_created", "post_id": str(post["id"]), "user_id": str(user.id)})
    return _back_to_feed()


@router.post(f"{FEED_PATH}/posts/{{post_id}}/like")
async def toggle_like(
    post_id: UUID,
    like: str = Form("1"),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> RedirectResponse:
    snapshot = set_post_like_state(db, post_id=post_id, user=user, should_like=like == "1")
    await broadcast_engagement_snapshot(snapshot)
    return _back_to_feed()


@router.post(f"{FEED_PATH}/posts/{{post_id}}/comments")
async def comment_on_post(
    post_id: UUID,
    content: str = Form(""),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> RedirectResponse:
    add_comment(db, post_id=post_id, author=user, content=content)
    return _back_to_feed()
