"""Debounced member search."""
from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from typing import Any, Callable

import httpx

from athlnet.constants import MIN_SEARCH_CHARS

from .api import ApiError

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class DebouncedSearch:
    """Runs ``search(term)`` once typing pauses for ``delay`` seconds.

    ``update`` must be called from a running event loop. Each call cancels the
    pending timer; terms shorter than ``min_chars`` clear the results without
    calling ``search``.
    """

    def __init__(
        self,
        search: Callable[[str], Any],
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        min_chars: int = MIN_SEARCH_CHARS,
    ) -> None:
        self._search = search
        self.delay = delay
        self.min_chars = min_chars
        self.results: list[Any] = []
        self.last_error: str | None = None
        self.loading = False
        self._task: asyncio.Task[None] | None = None

    def update(self, term: str) -> None:
        self.cancel()
        cleaned = (term or "").strip()
        if len(cleaned) < self.min_chars:
            self.results = []
            self.loading = False
            return
        self.loading = True
        self._task = asyncio.get_running_loop().create_task(self._run(cleaned))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, term: str) -> None:
        await asyncio.sleep(self.delay)
        try:
            outcome = self._search(term)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            self.results = list(outcome or [])
            self.last_error = None
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Search for %r failed: %s", term, exc)
            self.results = []
            self.last_error = str(exc)
        finally:
            self.loading = False

    async def wait(self) -> None:
        """Wait for the scheduled search, if any, to finish."""

        task = self._task
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task


__all__ = ["DebouncedSearch", "DEFAULT_DEBOUNCE_SECONDS"]
