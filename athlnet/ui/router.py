"""Aggregate UI page routes into a single router."""
from __future__ import annotations

from fastapi import APIRouter

from .pages import auth, dashboard, feed, landing, messaging, profile, search

router = APIRouter(include_in_schema=False)

router.include_router(landing.router)
router.include_router(auth.router)
router.include_router(feed.router)
router.include_router(messaging.router)
router.include_router(search.router)
router.include_router(profile.router)
router.include_router(dashboard.router)

__all__ = ["router"]
