"""Page-level authentication guard."""
from __future__ import annotations

from fastapi import Depends

from athlnet.models import User
from athlnet.services import get_optional_user


class PageAuthRequired(Exception):
    """Raised by :func:`require_page_user`; the app turns it into a redirect to the landing page."""

    redirect_to = "/"


async def require_page_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise PageAuthRequired()
    return user


__all__ = ["PageAuthRequired", "require_page_user"]
