"""Optimistic like state for a rendered feed.

The command passed to :meth:`FeedState.toggle_like` performs the network call
(usually :meth:`AthlNetClient.set_post_like`); the state flips first, then
either reconciles with the returned snapshot or rolls back.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

import httpx

from .api import ApiError

logger = logging.getLogger(__name__)

LikeCommand = Callable[[str, bool], Mapping[str, Any]]


@dataclass(slots=True)
class PostView:
    post_id: str
    liked: bool
    like_count: int


class FeedState:
    def __init__(self, posts: Iterable[PostView] = ()) -> None:
        self.posts: dict[str, PostView] = {view.post_id: view for view in posts}
        self.last_error: str | None = None

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], *, viewer_id: Any) -> "FeedState":
        viewer = str(viewer_id) if viewer_id is not None else None
        views = []
        for record in records:
            likes = [str(uid) for uid in record.get("likes") or []]
            views.append(PostView(post_id=str(record["id"]), liked=viewer in likes, like_count=len(likes)))
        return cls(views)

    def toggle_like(self, post_id: str, command: LikeCommand) -> PostView:
        view = self.posts[str(post_id)]
        before = (view.liked, view.like_count)
        should_like = not view.liked

        view.liked = should_like
        view.like_count = max(view.like_count + (1 if should_like else -1), 0)
        self.last_error = None

        try:
            snapshot = command(view.post_id, should_like)
        except (ApiError, httpx.HTTPError) as exc:
            view.liked, view.like_count = before
            self.last_error = str(exc)
            logger.warning("Like toggle failed for %s: %s", view.post_id, exc)
            return view

        view.liked = bool(snapshot.get("viewer_has_liked", should_like))
        view.like_count = int(snapshot.get("like_count", view.like_count))
        return view


__all__ = ["FeedState", "PostView", "LikeCommand"]
