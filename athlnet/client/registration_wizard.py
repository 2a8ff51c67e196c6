"""Client-side state for the five-step registration wizard."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import httpx

from athlnet.registration import TOTAL_STEPS, first_invalid_step, validate_step

from .api import ApiError

logger = logging.getLogger(__name__)


class RegistrationWizard:
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.current_step = 1
        self.errors: dict[str, str] = {}
        self.submitted = False
        self.last_error: str | None = None

    @property
    def progress(self) -> int:
        return round(self.current_step / TOTAL_STEPS * 100)

    @property
    def is_last_step(self) -> bool:
        return self.current_step == TOTAL_STEPS

    def update(self, **fields: Any) -> None:
        self.data.update(fields)
        for name in fields:
            self.errors.pop(name, None)

    def next(self) -> bool:
        """Advance when the current step is valid; otherwise keep its errors."""

        self.errors = validate_step(self.current_step, self.data)
        if self.errors:
            return False
        if self.current_step < TOTAL_STEPS:
            self.current_step += 1
        return True

    def previous(self) -> None:
        if self.current_step > 1:
            self.current_step -= 1
        self.errors = {}

    def go_to(self, step: int) -> bool:
        # Only already visited steps can be reopened.
        if not 1 <= step < self.current_step:
            return False
        self.current_step = step
        self.errors = {}
        return True

    def submit(self, command: Callable[[dict[str, Any]], Any]) -> Any:
        if not self.is_last_step:
            self.next()
            return None

        invalid = first_invalid_step(self.data)
        if invalid is not None:
            self.current_step = invalid
            self.errors = validate_step(invalid, self.data)
            return None

        try:
            result = command(dict(self.data))
        except ApiError as exc:
            detail = exc.detail if isinstance(exc.detail, dict) else {}
            self.errors = dict(detail.get("errors") or {})
            self.last_error = detail.get("message") or str(exc.detail)
            return None
        except httpx.HTTPError as exc:
            logger.warning("Registration request failed: %s", exc)
            self.last_error = str(exc)
            return None

        self.submitted = True
        return result


__all__ = ["RegistrationWizard"]
