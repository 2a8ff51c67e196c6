"""Export page routers for composition."""
from __future__ import annotations

from . import auth, dashboard, feed, landing, messaging, profile, search

__all__ = [
    "auth",
    "dashboard",
    "feed",
    "landing",
    "messaging",
    "profile",
    "search",
]
