"""Sign-in, registration wizard and sign-out pages."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from athlnet.constants import ROLES
from athlnet.database import get_session
from athlnet.models import User
from athlnet.registration import REGISTRATION_STEPS, first_invalid_step
from athlnet.routers.auth import clear_session_cookie, set_session_cookie
from athlnet.schemas import RegisterRequest
from athlnet.services import authenticate_user, create_access_token, get_optional_user, register_user
from athlnet.services.profile_service import set_presence

from ..template_helpers import render_template

router = APIRouter()

logger = logging.getLogger(__name__)

HOME_AFTER_SIGN_IN = "/home-feed"

_CONSENT_FIELDS = ("accept_terms", "accept_privacy", "age_confirmation")
_TEXT_FIELDS = (
    "role",
    "first_name",
    "last_name",
    "email",
    "date_of_birth",
    "city",
    "country",
    "bio",
    "phone",
    "gender",
    "title",
    "password",
    "confirm_password",
    "primary_sport",
    "skill_level",
    "experience",
    "specialization",
    "coaching_experience",
    "company_name",
    "industry",
)


def _signed_in_redirect(user: User) -> RedirectResponse:
    response = RedirectResponse(HOME_AFTER_SIGN_IN, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, create_access_token(user.id))
    return response


def registration_values(form: FormData) -> dict[str, Any]:
    """Turn the wizard's flat form fields into a ``RegisterRequest`` payload."""

    values: dict[str, Any] = {}
    for name in _TEXT_FIELDS:
        raw = form.get(name)
        if raw is not None:
            values[name] = str(raw)

    sports = [item.strip() for item in str(form.get("sports") or "").split(",") if item.strip()]
    primary = (values.get("primary_sport") or "").strip()
    if primary and primary not in sports:
        sports.insert(0, primary)
    values["sports"] = sports

    values["achievements"] = [
        {"title": line.strip()} for line in str(form.get("achievements") or "").splitlines() if line.strip()
    ]
    values["privacy_settings"] = {"profile_visibility": str(form.get("profile_visibility") or "public")}
    for name in _CONSENT_FIELDS:
        values[name] = str(form.get(name) or "").lower() in {"true", "on", "1", "yes"}
    return values


def _registration_page(
    request: Request,
    *,
    values: dict[str, Any] | None = None,
    errors: dict[str, str] | None = None,
    active_step: int = 1,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return render_template(
        request,
        "registration.html",
        {
            "page_title": "Join AthlNet",
            "steps": REGISTRATION_STEPS,
            "roles": ROLES,
            "values": values or {},
            "errors": errors or {},
            "active_step": active_step,
        },
        status_code=status_code,
    )


@router.get("/user-login", response_class=HTMLResponse)
async def login_page(request: Request, user: User | None = Depends(get_optional_user)):
    if user is not None:
        return RedirectResponse(HOME_AFTER_SIGN_IN, status_code=status.HTTP_303_SEE_OTHER)
    return render_template(request, "login.html", {"page_title": "Sign in", "email": "", "error": None})


@router.post("/user-login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_session),
):
    user = authenticate_user(db, email, password) if email and password else None
    if user is None:
        return render_template(
            request,
            "login.html",
            {"page_title": "Sign in", "email": email, "error": "Invalid email or password"},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    set_presence(db, user, online=True)
    logger.info("User %s signed in from the login page", user.id)
    return _signed_in_redirect(user)


@router.get("/user-registration", response_class=HTMLResponse)
async def registration_page(request: Request, user: User | None = Depends(get_optional_user)):
    if user is not None:
        return RedirectResponse(HOME_AFTER_SIGN_IN, status_code=status.HTTP_303_SEE_OTHER)
    return _registration_page(request)


@router.post("/user-registration", response_class=HTMLResponse)
async def registration_submit(request: Request, db: Session = Depends(get_session)):
    values = registration_values(await request.form())
    try:
        user, _ = register_user(db, RegisterRequest(**values))
    except HTTPException as exc:
        if exc.status_code == status.HTTP_409_CONFLICT:
            errors = {"email": str(exc.detail)}
            step = 2
        elif exc.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY and isinstance(exc.detail, dict):
            errors = dict(exc.detail.get("errors") or {})
            step = first_invalid_step(values) or 1
        else:
            raise
        values.pop("password", None)
        values.pop("confirm_password", None)
        return _registration_page(request, values=values, errors=errors, active_step=step, status_code=exc.status_code)
    return _signed_in_redirect(user)


@router.post("/user-logout")
async def logout_submit(
    db: Session = Depends(get_session),
    user: User | None = Depends(get_optional_user),
) -> RedirectResponse:
    if user is not None:
        set_presence(db, user, online=False)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response
