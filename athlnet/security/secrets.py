"""Helpers for reading credentials from the environment without echoing them."""
from __future__ import annotations

import os
from typing import Final, Iterable

__all__ = ["MissingSecretError", "require_secret", "is_placeholder", "missing_variables"]


class MissingSecretError(RuntimeError):
    """Raised when a credential is absent or still holds a template value."""


_TEMPLATE_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "example",
        "your-key-here",
        "your-secret-here",
        "todo",
    }
)


def is_placeholder(value: str | None) -> bool:
    if value is None:
        return True
    cleaned = value.strip().lower()
    return cleaned == "" or cleaned in _TEMPLATE_VALUES


def missing_variables(names: Iterable[str]) -> list[str]:
    """Return the sorted subset of ``names`` that are unset or placeholders."""

    return sorted(name for name in names if is_placeholder(os.getenv(name)))


def require_secret(name: str) -> str:
    """Return the trimmed value of ``name`` or raise :class:`MissingSecretError`."""

    raw = os.getenv(name)
    if is_placeholder(raw):
        raise MissingSecretError(f"{name} must be set to a real value")
    return raw.strip()
