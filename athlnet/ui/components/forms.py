"""Form field components styled with Tailwind."""
from __future__ import annotations

from typing import Iterable

from markupsafe import Markup, escape

from .feedback import field_error

_INPUT_BASE = (
    "block w-full rounded-xl border border-slate-700/60 bg-slate-900/70 px-4 py-2.5 text-sm text-slate-100 "
    "placeholder:text-slate-500 focus:border-orange-500 focus:ring-2 focus:ring-orange-600"
)


def text_input(
    name: str,
    *,
    label: str,
    value: str | None = None,
    error: str | None = None,
    placeholder: str = "",
    type_: str = "text",
    required: bool = False,
) -> Markup:
    required_attr = "required" if required else ""
    value_attr = f'value="{escape(value)}"' if value and type_ != "password" else ""
    return Markup(
        f"""
        <label class="flex flex-col gap-2 text-sm font-medium text-slate-200" for="{name}">
            <span>{escape(label)}</span>
            <input id="{name}" name="{name}" type="{type_}" placeholder="{escape(placeholder)}" class="{_INPUT_BASE}" {value_attr} {required_attr}>
            {field_error(error)}
        </label>
        """
    )


def password_input(name: str, *, label: str, error: str | None = None, required: bool = False) -> Markup:
    return text_input(name, label=label, error=error, type_="password", required=required)


def textarea(
    name: str,
    *,
    label: str,
    value: str | None = None,
    error: str | None = None,
    placeholder: str = "",
    rows: int = 4,
) -> Markup:
    return Markup(
        f"""
        <label class="flex flex-col gap-2 text-sm font-medium text-slate-200" for="{name}">
            <span>{escape(label)}</span>
            <textarea id="{name}" name="{name}" rows="{rows}" placeholder="{escape(placeholder)}" class="{_INPUT_BASE} resize-none">{escape(value or '')}</textarea>
            {field_error(error)}
        </label>
        """
    )


def select(
    name: str,
    *,
    label: str,
    options: Iterable[tuple[str, str]],
    selected: str | None = None,
    error: str | None = None,
) -> Markup:
    option_html = "".join(
        f"<option value=\"{escape(value)}\"{' selected' if value == selected else ''}>{escape(text)}</option>"
        for value, text in options
    )
    return Markup(
        f"""
        <label class="flex flex-col gap-2 text-sm font-medium text-slate-200" for="{name}">
            <span>{escape(label)}</span>
            <select id="{name}" name="{name}" class="{_INPUT_BASE}"><option value="">Select...</option>{option_html}</select>
            {field_error(error)}
        </label>
        """
    )


def checkbox(name: str, *, label: str, checked: bool = False) -> Markup:
    state = "checked" if checked else ""
    return Markup(
        f"""
        <label class="flex items-center gap-3 text-sm text-slate-200">
            <input id="{name}" name="{name}" type="checkbox" value="true" class="rounded border-slate-600" {state}>
            <span>{escape(label)}</span>
        </label>
        """
    )


def file_input(name: str, *, label: str, accept: str = "image/*,video/*") -> Markup:
    return Markup(
        f"""
        <label class="flex flex-col gap-2 text-sm font-medium text-slate-200" for="{name}">
            <span>{escape(label)}</span>
            <input id="{name}" name="{name}" type="file" accept="{accept}" class="{_INPUT_BASE}">
        </label>
        """
    )


__all__ = ["text_input", "password_input", "textarea", "select", "checkbox", "file_input"]
