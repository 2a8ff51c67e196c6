from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from athlnet.models import User
from athlnet.services import get_optional_user
from athlnet.services.profile_service import user_summary

from ..template_helpers import render_template

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def landing(request: Request, user: User | None = Depends(get_optional_user)) -> HTMLResponse:
    return render_template(
        request,
        "landing.html",
        {
            "page_title": "Where athletes connect",
            "viewer": user_summary(user) if user else None,
        },
    )
