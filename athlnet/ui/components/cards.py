"""Card-style components for the feed, discovery, messaging and dashboard."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from urllib.parse import quote

from markupsafe import Markup, escape

from . import buttons

_CARD = "rounded-3xl bg-slate-900/70 p-6 shadow-lg shadow-black/20"


def avatar_url(photo_url: str | None, name: str) -> str:
    if photo_url:
        return photo_url
    return "https://ui-avatars.com/api/?background=ea580c&color=fff&name=" + quote(name or "User")


def _date_text(value: datetime | None, pattern: str = "%b %d, %Y %I:%M %p") -> str:
    return value.strftime(pattern) if value else ""


def _author_line(author: Mapping[str, Any]) -> str:
    parts = [author.get("role"), author.get("primary_sport"), author.get("location")]
    return " · ".join(str(part).title() if index == 0 else str(part) for index, part in enumerate(parts) if part)


def _comment_line(comment: Mapping[str, Any]) -> str:
    author = comment.get("author") or {}
    return (
        "<li class=\"text-sm text-slate-300\"><span class=\"font-semibold text-white\">"
        f"{escape(author.get('display_name', ''))}</span> {escape(comment.get('content', ''))}</li>"
    )


def post_card(post: Mapping[str, Any], *, viewer_id: Any = None) -> Markup:
    """Render a feed post with its like, comment and share controls."""

    author = post.get("author") or {}
    name = author.get("display_name") or "New User"
    likes = [str(uid) for uid in post.get("likes") or []]
    liked = viewer_id is not None and str(viewer_id) in likes
    post_id = str(post["id"])

    media_html = ""
    for item in post.get("media") or []:
        url = escape(item.get("url", ""))
        if item.get("type") == "video":
            media_html += f"<video src=\"{url}\" controls class=\"mt-4 w-full rounded-2xl\"></video>"
        else:
            media_html += f"<img src=\"{url}\" alt=\"media\" class=\"mt-4 w-full rounded-2xl object-cover\">"

    comments_html = "".join(_comment_line(comment) for comment in post.get("comments") or [])

    return Markup(
        f"""
        <article class="{_CARD}" data-post-id="{escape(post_id)}">
            <header class="flex items-center gap-4">
                <img src="{escape(avatar_url(author.get('photo_url'), name))}" alt="{escape(name)}" class="h-12 w-12 rounded-full">
                <div>
                    <a href="/profile/{escape(str(author.get('id', '')))}" class="text-sm font-semibold text-white">{escape(name)}</a>
                    <p class="text-xs text-slate-400">{escape(_author_line(author))}</p>
                    <p class="text-xs text-slate-500">{escape(_date_text(post.get('created_at')))}</p>
                </div>
            </header>
            <p class="mt-4 whitespace-pre-line text-sm text-slate-200">{escape(post.get('content') or '')}</p>
            {media_html}
            <footer class="mt-6 flex flex-wrap items-center gap-3 text-sm text-slate-400">
                <form method="post" action="/home-feed/posts/{escape(post_id)}/like" class="like-form">
                    <input type="hidden" name="like" value="{'0' if liked else '1'}">
                    {buttons.like_button(post_id=post_id, liked=liked, count=len(likes))}
                </form>
                <span class="comment-count">{int(post.get('comment_count') or 0)} comments</span>
                <span class="share-count">{int(post.get('shares') or 0)} shares</span>
            </footer>
            <ul class="mt-4 flex flex-col gap-1">{comments_html}</ul>
        </article>
        """
    )


def user_card(user: Mapping[str, Any]) -> Markup:
    name = user.get("display_name") or "New User"
    sports = ", ".join(user.get("sports") or [])
    return Markup(
        f"""
        <div class="{_CARD} flex items-center gap-4" data-user-id="{escape(str(user['id']))}">
            <img src="{escape(avatar_url(user.get('photo_url'), name))}" alt="{escape(name)}" class="h-14 w-14 rounded-full">
            <div class="flex-1">
                <a href="/profile/{escape(str(user['id']))}" class="font-semibold text-white">{escape(name)}</a>
                <p class="text-xs text-slate-400">{escape(user.get('title') or _author_line(user))}</p>
                <p class="text-xs text-slate-500">{escape(sports)}</p>
            </div>
            <span class="text-xs text-slate-400">{int(user.get('followers_count') or 0)} followers</span>
        </div>
        """
    )


def conversation_item(conversation: Mapping[str, Any], *, active: bool = False) -> Markup:
    other = conversation.get("other_user") or {}
    name = other.get("display_name") or "New User"
    unread = int(conversation.get("unread_count") or 0)
    badge = (
        f"<span class=\"rounded-full bg-orange-600 px-2 py-0.5 text-xs font-semibold text-white\">{unread}</span>"
        if unread
        else ""
    )
    tone = "bg-orange-500/10 border border-orange-400/40" if active else "bg-slate-900/70"
    presence = "bg-emerald-400" if other.get("is_online") else "bg-slate-600"
    return Markup(
        f"""
        <a href="/messaging?with={escape(str(other.get('id', '')))}" class="{tone} flex items-center gap-3 rounded-2xl p-4">
            <span class="h-2 w-2 rounded-full {presence}"></span>
            <div class="flex-1">
                <p class="text-sm font-semibold text-white">{escape(name)}</p>
                <p class="truncate text-xs text-slate-400">{escape(conversation.get('last_message') or '')}</p>
            </div>
            {badge}
        </a>
        """
    )


def message_bubble(message: Mapping[str, Any], *, outbound: bool) -> Markup:
    alignment = "items-end" if outbound else "items-start"
    palette = "bg-orange-600 text-white" if outbound else "bg-slate-800/90 text-slate-100"
    body = escape(message.get("content") or "")
    if message.get("media_url"):
        url = escape(message["media_url"])
        if message.get("type") == "image":
            body += Markup(f"<img src=\"{url}\" alt=\"attachment\" class=\"mt-2 max-h-64 rounded-xl\">")
        else:
            body += Markup(f"<a href=\"{url}\" class=\"mt-2 block underline\">Attachment</a>")
    return Markup(
        f"""
        <div class="flex flex-col {alignment}">
            <div class="max-w-[75%] rounded-2xl px-4 py-3 text-sm shadow-lg {palette}">
                <p class="whitespace-pre-line leading-relaxed">{body}</p>
                <span class="mt-2 block text-right text-xs text-white/70">{escape(_date_text(message.get('created_at'), '%I:%M %p'))}</span>
            </div>
        </div>
        """
    )


def kpi_card(kpi: Mapping[str, Any]) -> Markup:
    change = float(kpi.get("change") or 0)
    tone = {"up": "text-emerald-400", "down": "text-rose-400"}.get(kpi.get("trend"), "text-slate-400")
    value = kpi.get("value")
    value_text = f"{value:,.1f}" if isinstance(value, float) else f"{value:,}"
    return Markup(
        f"""
        <div class="{_CARD}" data-kpi="{escape(kpi.get('key', ''))}">
            <p class="text-xs uppercase tracking-wide text-slate-400">{escape(kpi.get('title', ''))}</p>
            <p class="mt-2 text-3xl font-bold text-white">{escape(value_text)}{escape(kpi.get('suffix') or '')}</p>
            <p class="mt-1 text-xs {tone}">{change:+.1f}%</p>
        </div>
        """
    )


def notification_item(*, content: str, timestamp: datetime, read: bool) -> Markup:
    tone = "bg-slate-900/70" if read else "bg-orange-500/10 border border-orange-400/40"
    return Markup(
        f"""
        <li class="{tone} rounded-2xl p-4">
            <time class="text-xs text-slate-400">{escape(_date_text(timestamp))}</time>
            <p class="mt-2 text-sm text-slate-200">{escape(content)}</p>
        </li>
        """
    )


__all__ = ["avatar_url", "post_card", "user_card", "conversation_item", "message_bubble", "kpi_card", "notification_item"]
