"""Schemas for the analytics dashboard."""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

TimeRange = Literal["7d", "30d", "90d"]


class KpiMetric(BaseModel):
    key: str
    title: str
    value: float
    change: float
    trend: Literal["up", "down", "flat"]
    suffix: str = ""


class EngagementPoint(BaseModel):
    day: date
    engagement: int
    views: int


class ContentRow(BaseModel):
    post_id: UUID
    excerpt: str
    created_at: datetime
    reach: int
    engagement: int
    shares: int
    engagement_rate: float


class NetworkSegment(BaseModel):
    role: str
    count: int


class DashboardResponse(BaseModel):
    time_range: TimeRange
    kpis: list[KpiMetric]
    engagement: list[EngagementPoint]
    content: list[ContentRow]
    network: list[NetworkSegment]


__all__ = [
    "TimeRange",
    "KpiMetric",
    "EngagementPoint",
    "ContentRow",
    "NetworkSegment",
    "DashboardResponse",
]
