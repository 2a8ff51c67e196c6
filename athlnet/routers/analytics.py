"""Analytics dashboard API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import DashboardResponse, TimeRange
from ..services import build_dashboard, export_content_csv, get_current_user
from ..services.analytics_service import DEFAULT_TIME_RANGE

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard_endpoint(
    time_range: TimeRange = Query(default=DEFAULT_TIME_RANGE, alias="range"),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> DashboardResponse:
    return DashboardResponse(**build_dashboard(db, user=current_user, time_range=time_range))


@router.get("/export.csv")
async def export_endpoint(
    time_range: TimeRange = Query(default=DEFAULT_TIME_RANGE, alias="range"),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    body = export_content_csv(db, user=current_user, time_range=time_range)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="athlnet-content-{time_range}.csv"'},
    )


__all__ = ["router"]
