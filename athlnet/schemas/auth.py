"""Pydantic schemas for authentication endpoints."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .profiles import UserSummary


class RegisterRequest(BaseModel):
    """Everything the five-step wizard collects.

    Fields are deliberately lenient here; the wizard step rules produce the
    user-facing messages.
    """

    role: str = ""
    # personal info
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    date_of_birth: str = ""
    city: str = ""
    country: str = ""
    bio: str = ""
    phone: str | None = None
    gender: str | None = None
    title: str | None = None
    password: str = ""
    confirm_password: str = ""
    # sports details
    primary_sport: str | None = None
    sports: list[str] = Field(default_factory=list)
    skill_level: str | None = None
    experience: str | None = None
    specialization: str | None = None
    coaching_experience: str | None = None
    company_name: str | None = None
    industry: str | None = None
    # achievements and privacy
    achievements: list[dict[str, Any]] = Field(default_factory=list)
    privacy_settings: dict[str, Any] = Field(default_factory=dict)
    accept_terms: bool = False
    accept_privacy: bool = False
    age_confirmation: bool = False
    photo_url: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    access_token: str
    user_id: UUID
    token_type: str = "bearer"
    role: str | None = None
    display_name: str | None = None


class SessionStateResponse(BaseModel):
    """Auth-state snapshot shared by every page: ``{user, loading, is_authenticated}``."""

    user: UserSummary | None = None
    loading: bool = False
    is_authenticated: bool = False


__all__ = ["RegisterRequest", "LoginRequest", "AuthResponse", "SessionStateResponse"]
