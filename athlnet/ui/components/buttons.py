"""Reusable button components for the UI."""
from __future__ import annotations

from markupsafe import Markup, escape

_PRIMARY = (
    "inline-flex items-center justify-center gap-2 rounded-full bg-orange-600 px-5 py-2 text-sm font-semibold "
    "text-white shadow-lg shadow-orange-500/30 transition hover:bg-orange-500"
)
_GHOST = (
    "inline-flex items-center gap-2 rounded-full border border-slate-600/40 px-4 py-2 text-sm font-medium "
    "text-slate-100 transition hover:border-orange-500 hover:text-orange-300"
)


def primary(
    label: str,
    *,
    id_: str | None = None,
    href: str | None = None,
    icon: str | None = None,
    submit: bool = False,
) -> Markup:
    """Return a stylised primary button, or a link styled as one when ``href`` is given."""

    content = f"<span>{escape(label)}</span>"
    if icon:
        content = f"<span class=\"text-base\">{icon}</span>{content}"

    attrs = []
    if id_:
        attrs.append(f'id="{escape(id_)}"')
    if href:
        attrs.append(f'href="{escape(href)}"')
        tag = "a"
    else:
        tag = "button"
        attrs.append('type="submit"' if submit else 'type="button"')

    return Markup(f"<{tag} class=\"{_PRIMARY}\" {' '.join(attrs)}>{content}</{tag}>")


def ghost(label: str, *, id_: str | None = None, href: str | None = None, submit: bool = False) -> Markup:
    attrs = []
    if id_:
        attrs.append(f'id="{escape(id_)}"')
    if href:
        return Markup(f"<a class=\"{_GHOST}\" href=\"{escape(href)}\" {' '.join(attrs)}>{escape(label)}</a>")
    attrs.append('type="submit"' if submit else 'type="button"')
    return Markup(f"<button class=\"{_GHOST}\" {' '.join(attrs)}>{escape(label)}</button>")


def like_button(*, post_id: str, liked: bool, count: int) -> Markup:
    """Like toggle; ``data-liked`` and the counter mirror the post's ``likes`` list."""

    palette = "bg-rose-600 text-white" if liked else "bg-slate-800/90 text-slate-300"
    state = "true" if liked else "false"
    return Markup(
        f"<button type=\"submit\" class=\"like-btn inline-flex items-center gap-2 rounded-full px-4 py-2 {palette}\" "
        f"data-post-id=\"{escape(post_id)}\" data-liked=\"{state}\" aria-pressed=\"{state}\">"
        f"<span class=\"text-base\">&#10084;</span><span class=\"like-count\">{int(count)}</span></button>"
    )


def follow_button(*, user_id: str, following: bool) -> Markup:
    label = "Following" if following else "Follow"
    state = "true" if following else "false"
    return Markup(
        f"<button type=\"submit\" class=\"{_GHOST} follow-btn\" data-user-id=\"{escape(user_id)}\" "
        f"data-following=\"{state}\">{label}</button>"
    )


__all__ = ["primary", "ghost", "like_button", "follow_button"]
