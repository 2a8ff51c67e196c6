from uuid import UUID

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from athlnet.database import get_session
from athlnet.models import User
from athlnet.services import get_profile, set_follow_state
from athlnet.services.post_service import list_user_posts
from athlnet.services.profile_service import user_summary

from ..guards import require_page_user
from ..template_helpers import render_template

router = APIRouter()


def _profile_page(request: Request, db: Session, viewer: User, user_id: UUID) -> HTMLResponse:
    profile = get_profile(db, user_id=user_id, viewer_id=viewer.id)
    return render_template(
        request,
        "profile.html",
        {
            "page_title": profile["display_name"],
            "active_nav": "/user-profile" if profile["is_own_profile"] else None,
            "viewer": user_summary(viewer),
            "profile": profile,
            "posts": list_user_posts(db, author_id=user_id, viewer_id=viewer.id),
        },
    )


def _safe_next(target: str, fallback: str) -> str:
    if target.startswith("/") and not target.startswith("//"):
        return target
    return fallback


@router.get("/user-profile", response_class=HTMLResponse)
async def own_profile(
    request: Request,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    return _profile_page(request, db, user, user.id)


@router.get("/profile/{user_id}", response_class=HTMLResponse)
async def member_profile(
    request: Request,
    user_id: UUID,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    return _profile_page(request, db, user, user_id)


@router.post("/profile/{user_id}/follow")
async def toggle_follow(
    user_id: UUID,
    follow: str = Form("1"),
    next_url: str = Form("", alias="next"),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> RedirectResponse:
    set_follow_state(db, follower=user, target_id=user_id, should_follow=follow == "1")
    target = _safe_next(next_url, f"/profile/{user_id}")
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
