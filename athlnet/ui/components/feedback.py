"""Feedback elements: toasts, banners and error panels."""
from __future__ import annotations

from markupsafe import Markup, escape


def toast_container() -> Markup:
    return Markup(
        """
        <div id="toast-root" class="pointer-events-none fixed inset-x-0 top-5 z-50 flex flex-col items-center gap-3"></div>
        """
    )


def notice_banner(message: str | None) -> Markup:
    """Amber strip shown when part of the platform is not configured."""

    if not message:
        return Markup("")
    return Markup(
        f"""
        <div role="status" class="config-notice border-b border-amber-500/40 bg-amber-500/10 px-6 py-3 text-center text-sm text-amber-200">
            {escape(message)}
        </div>
        """
    )


def error_panel(*, title: str, detail: str | None = None) -> Markup:
    detail_html = f"<p class=\"mt-2 text-sm text-slate-300\">{escape(detail)}</p>" if detail else ""
    return Markup(
        f"""
        <section class="error-panel mx-auto max-w-xl rounded-3xl border border-rose-500/40 bg-rose-500/10 p-8 text-center">
            <h1 class="text-xl font-semibold text-white">{escape(title)}</h1>
            {detail_html}
            <a href="/" class="mt-6 inline-block text-sm text-orange-300 underline">Back to AthlNet</a>
        </section>
        """
    )


def field_error(message: str | None) -> Markup:
    if not message:
        return Markup("")
    return Markup(f"<p class=\"field-error text-xs text-rose-400\">{escape(message)}</p>")


__all__ = ["toast_container", "notice_banner", "error_panel", "field_error"]
