"""Search and discovery page."""
from __future__ import annotations

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from athlnet.constants import MIN_SEARCH_CHARS, ROLES
from athlnet.database import get_session
from athlnet.models import User
from athlnet.services import search_users, suggested_users
from athlnet.services.profile_service import user_summary
from athlnet.services.search_service import create_saved_search, list_saved_searches

from ..guards import require_page_user
from ..template_helpers import render_template

router = APIRouter()

SEARCH_PATH = "/search-and-discovery"
_FILTERS = ("role", "sport", "location")


def saved_search_href(criteria: dict) -> str:
    params = {key: value for key, value in criteria.items() if value}
    return f"{SEARCH_PATH}?{urlencode(params)}" if params else SEARCH_PATH


@router.get(SEARCH_PATH, response_class=HTMLResponse)
async def search_and_discovery(
    request: Request,
    q: str = "",
    role: str = "",
    sport: str = "",
    location: str = "",
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    filters = {"role": role, "sport": sport, "location": location}
    term = q.strip()
    results = search_users(db, term, viewer_id=user.id, filters=filters)
    saved = [
        {"id": item.id, "name": item.name, "href": saved_search_href(item.criteria or {})}
        for item in list_saved_searches(db, user_id=user.id)
    ]
    return render_template(
        request,
        "search.html",
        {
            "page_title": "Discover",
            "active_nav": SEARCH_PATH,
            "viewer": user_summary(user),
            "query": term,
            "filters": filters,
            "role_options": [(role, role.title()) for role in ROLES],
            "results": results,
            "too_short": 0 < len(term) < MIN_SEARCH_CHARS,
            "suggestions": suggested_users(db, viewer=user, limit=6),
            "saved_searches": saved,
        },
    )


@router.post(f"{SEARCH_PATH}/saved")
async def save_search(
    name: str = Form(""),
    q: str = Form(""),
    role: str = Form(""),
    sport: str = Form(""),
    location: str = Form(""),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> RedirectResponse:
    criteria = {"q": q.strip(), "role": role, "sport": sport, "location": location}
    create_saved_search(db, user_id=user.id, name=name or q, criteria=criteria)
    return RedirectResponse(saved_search_href(criteria), status_code=status.HTTP_303_SEE_OTHER)
