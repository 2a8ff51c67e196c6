"""Layout building blocks shared across pages."""
from __future__ import annotations

from typing import Any, Mapping

from markupsafe import Markup, escape

NAV_LINKS = (
    ("Feed", "/home-feed"),
    ("Discover", "/search-and-discovery"),
    ("Messages", "/messaging"),
    ("Analytics", "/dashboard-analytics"),
    ("Profile", "/user-profile"),
)


def navbar(*, active: str | None = None, viewer: Mapping[str, Any] | None = None) -> Markup:
    links_html: list[str] = []
    if viewer:
        for label, href in NAV_LINKS:
            text_class = "text-white" if active == href else "text-slate-300"
            links_html.append(
                f"<a href=\"{href}\" class=\"rounded-full px-4 py-2 text-sm font-medium transition hover:text-white {text_class}\">{label}</a>"
            )
        auth_html = (
            f"<span class=\"text-sm text-slate-300\">{escape(viewer.get('display_name') or '')}</span>"
            "<form method=\"post\" action=\"/user-logout\"><button type=\"submit\" "
            "class=\"rounded-full border border-orange-500/40 px-4 py-2 text-sm font-semibold text-orange-300\">Sign out</button></form>"
        )
    else:
        auth_html = (
            "<a href=\"/user-login\" class=\"rounded-full border border-orange-500/40 px-4 py-2 text-sm font-semibold text-orange-300\">Sign in</a>"
            "<a href=\"/user-registration\" class=\"rounded-full bg-orange-600 px-4 py-2 text-sm font-semibold text-white\">Join</a>"
        )

    return Markup(
        f"""
        <header class="sticky top-0 z-40 border-b border-slate-800/60 bg-slate-950/90 backdrop-blur">
            <div class="mx-auto flex max-w-7xl flex-wrap items-center gap-3 px-6 py-4">
                <a href="/" class="flex-1 text-lg font-bold text-white">Athl<span class="text-orange-500">Net</span></a>
                <nav class="flex items-center gap-1">{''.join(links_html)}</nav>
                <div class="flex items-center gap-2">{auth_html}</div>
            </div>
        </header>
        """
    )


__all__ = ["navbar", "NAV_LINKS"]
