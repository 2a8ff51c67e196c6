"""Dashboard metrics computed from a member's posts, followers and achievements."""
from __future__ import annotations

import csv
import io
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models import Follow, Post, User
from ..models.base import as_utc, utcnow

logger = logging.getLogger(__name__)

TIME_RANGES = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_TIME_RANGE = "30d"
EXCERPT_LENGTH = 60


@dataclass(slots=True)
class TimeWindow:
    start: datetime
    end: datetime

    def contains(self, value: datetime | None) -> bool:
        moment = as_utc(value)
        return moment is not None and self.start <= moment < self.end


@dataclass(slots=True)
class PostTotals:
    views: int = 0
    likes: int = 0
    comments: int = 0

    @property
    def engagement(self) -> int:
        return self.likes + self.comments

    @property
    def engagement_rate(self) -> float:
        if not self.views:
            return 0.0
        return round(self.engagement / self.views * 100, 1)


def resolve_windows(time_range: str, *, now: datetime | None = None) -> tuple[TimeWindow, TimeWindow]:
    """Current window ending at ``now`` and the equally long window before it."""

    if time_range not in TIME_RANGES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown time range")
    end = as_utc(now) or utcnow()
    span = timedelta(days=TIME_RANGES[time_range])
    current = TimeWindow(start=end - span, end=end)
    previous = TimeWindow(start=end - 2 * span, end=end - span)
    return current, previous


def percent_change(current: float, previous: float) -> float:
    if not previous:
        return 100.0 if current else 0.0
    return round((current - previous) / previous * 100, 1)


def _trend(change: float) -> str:
    if change > 0:
        return "up"
    if change < 0:
        return "down"
    return "flat"


def achievement_score(achievements: list[Any] | None) -> int:
    return min(len(achievements or []) * 10, 100)


def _load_posts(db: Session, author_id: UUID) -> list[Post]:
    stmt = (
        select(Post)
        .options(selectinload(Post.likes), selectinload(Post.comments))
        .where(Post.author_id == author_id)
        .order_by(Post.created_at.desc())
    )
    return list(db.scalars(stmt))


def _totals(posts: list[Post], window: TimeWindow) -> PostTotals:
    totals = PostTotals()
    for post in posts:
        if not window.contains(post.created_at):
            continue
        totals.views += int(post.views or 0)
        totals.likes += len(post.likes)
        totals.comments += len(post.comments)
    return totals


def _new_followers(follows: list[Follow], window: TimeWindow) -> int:
    return sum(1 for follow in follows if window.contains(follow.created_at))


def _kpis(user: User, posts: list[Post], follows: list[Follow], current: TimeWindow, previous: TimeWindow):
    now_totals = _totals(posts, current)
    before_totals = _totals(posts, previous)
    growth_now = _new_followers(follows, current)
    growth_before = _new_followers(follows, previous)

    metrics = [
        ("profile_views", "Profile Views", now_totals.views, before_totals.views, ""),
        ("connection_growth", "Connection Growth", growth_now, growth_before, ""),
        (
            "post_engagement",
            "Post Engagement",
            now_totals.engagement_rate,
            before_totals.engagement_rate,
            "%",
        ),
    ]
    kpis = []
    for key, title, value, earlier, suffix in metrics:
        change = percent_change(value, earlier)
        kpis.append(
            {"key": key, "title": title, "value": value, "change": change, "trend": _trend(change), "suffix": suffix}
        )
    kpis.append(
        {
            "key": "achievement_score",
            "title": "Achievement Score",
            "value": achievement_score(user.achievements),
            "change": 0.0,
            "trend": "flat",
            "suffix": "",
        }
    )
    return kpis


def _days(window: TimeWindow) -> list[date]:
    first = window.start.date() + timedelta(days=1)
    last = window.end.date()
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def engagement_series(posts: list[Post], window: TimeWindow) -> list[dict[str, Any]]:
    """Per-day likes plus comments received and views of posts published that day."""

    engagement: Counter[date] = Counter()
    views: Counter[date] = Counter()
    for post in posts:
        for item in (*post.likes, *post.comments):
            if window.contains(item.created_at):
                engagement[as_utc(item.created_at).date()] += 1
        if window.contains(post.created_at):
            views[as_utc(post.created_at).date()] += int(post.views or 0)
    return [{"day": day, "engagement": engagement[day], "views": views[day]} for day in _days(window)]


def content_rows(posts: list[Post], window: TimeWindow) -> list[dict[str, Any]]:
    rows = []
    for post in posts:
        if not window.contains(post.created_at):
            continue
        totals = PostTotals(views=int(post.views or 0), likes=len(post.likes), comments=len(post.comments))
        text = (post.content or "").strip() or "Media post"
        if len(text) > EXCERPT_LENGTH:
            text = text[: EXCERPT_LENGTH - 3].rstrip() + "..."
        rows.append(
            {
                "post_id": post.id,
                "excerpt": text,
                "created_at": post.created_at,
                "reach": totals.views,
                "engagement": totals.engagement,
                "shares": int(post.shares or 0),
                "engagement_rate": totals.engagement_rate,
            }
        )
    return rows


def network_segments(db: Session, user_id: UUID) -> list[dict[str, Any]]:
    roles = db.scalars(
        select(User.role).join(Follow, Follow.follower_id == User.id).where(Follow.following_id == user_id)
    )
    counts = Counter((role or "athlete").lower() for role in roles)
    return [{"role": role, "count": count} for role, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))]


def build_dashboard(
    db: Session,
    *,
    user: User,
    time_range: str = DEFAULT_TIME_RANGE,
    now: datetime | None = None,
) -> dict[str, Any]:
    current, previous = resolve_windows(time_range, now=now)
    posts = _load_posts(db, user.id)
    follows = list(db.scalars(select(Follow).where(Follow.following_id == user.id)))

    logger.debug("Building %s dashboard for %s from %d posts", time_range, user.id, len(posts))
    return {
        "time_range": time_range,
        "kpis": _kpis(user, posts, follows, current, previous),
        "engagement": engagement_series(posts, current),
        "content": content_rows(posts, current),
        "network": network_segments(db, user.id),
    }


CSV_COLUMNS = ("post_id", "excerpt", "created_at", "reach", "engagement", "shares", "engagement_rate")


def export_content_csv(db: Session, *, user: User, time_range: str = DEFAULT_TIME_RANGE) -> str:
    """The content table as CSV text with a header row."""

    current, _ = resolve_windows(time_range)
    rows = content_rows(_load_posts(db, user.id), current)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    for row in rows:
        writer.writerow({**row, "created_at": as_utc(row["created_at"]).isoformat()})
    return buffer.getvalue()


__all__ = [
    "TIME_RANGES",
    "DEFAULT_TIME_RANGE",
    "TimeWindow",
    "PostTotals",
    "resolve_windows",
    "percent_change",
    "achievement_score",
    "engagement_series",
    "content_rows",
    "network_segments",
    "build_dashboard",
    "export_content_csv",
]
