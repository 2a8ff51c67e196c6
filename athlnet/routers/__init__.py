"""Aggregate router exports."""
from .analytics import router as analytics_router
from .auth import router as auth_router
from .coaching import router as coaching_router
from .follows import router as follows_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .realtime import router as realtime_router
from .registration import router as registration_router
from .search import router as search_router
from .uploads import router as uploads_router

__all__ = [
    "analytics_router",
    "auth_router",
    "coaching_router",
    "follows_router",
    "messages_router",
    "notifications_router",
    "posts_router",
    "profiles_router",
    "realtime_router",
    "registration_router",
    "search_router",
    "uploads_router",
]
