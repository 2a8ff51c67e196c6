"""Jinja rendering with the context every page shares."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from athlnet.config import get_settings
from athlnet.services.storage_service import storage_notice
from .components import TEMPLATE_COMPONENTS

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def page_context(**overrides: Any) -> dict[str, Any]:
    """Defaults for the base layout: nav state, signed-in viewer and the storage banner."""

    context: dict[str, Any] = {
        "app_name": get_settings().app_name,
        "components": TEMPLATE_COMPONENTS,
        "active_nav": None,
        "page_title": "",
        "viewer": None,
        "config_notice": storage_notice(),
    }
    context.update(overrides)
    return context


def render_template(
    request: Request,
    template_name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = 200,
):
    return templates.TemplateResponse(request, template_name, page_context(**(context or {})), status_code=status_code)


__all__ = ["render_template", "page_context", "templates", "TEMPLATES_DIR"]
