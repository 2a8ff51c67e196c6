"""Markup builders shared by every page template.

Templates reach them through the ``components`` context entry, e.g.
``components.cards.post_card(post, viewer_id=viewer.id)``.
"""
from __future__ import annotations

from types import MappingProxyType

from . import buttons, cards, feedback, forms, layout

TEMPLATE_COMPONENTS = MappingProxyType(
    {
        "buttons": buttons,
        "cards": cards,
        "feedback": feedback,
        "forms": forms,
        "layout": layout,
    }
)

__all__ = ["TEMPLATE_COMPONENTS", "buttons", "cards", "feedback", "forms", "layout"]
