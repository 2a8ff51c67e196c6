from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from athlnet.database import get_session
from athlnet.models import User
from athlnet.services import build_dashboard
from athlnet.services.analytics_service import DEFAULT_TIME_RANGE, TIME_RANGES
from athlnet.services.profile_service import user_summary

from ..guards import require_page_user
from ..template_helpers import render_template

router = APIRouter()


@router.get("/dashboard-analytics", response_class=HTMLResponse)
async def dashboard_analytics(
    request: Request,
    time_range: str = Query(DEFAULT_TIME_RANGE, alias="range"),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    if time_range not in TIME_RANGES:
        time_range = DEFAULT_TIME_RANGE
    dashboard = build_dashboard(db, user=user, time_range=time_range)
    peak = max((point["engagement"] for point in dashboard["engagement"]), default=0)
    return render_template(
        request,
        "dashboard.html",
        {
            "page_title": "Analytics",
            "active_nav": "/dashboard-analytics",
            "viewer": user_summary(user),
            "dashboard": dashboard,
            "time_ranges": list(TIME_RANGES),
            "peak_engagement": peak or 1,
        },
    )
