"""Step rules for the five-step member registration wizard.

The rules are pure functions over a flat mapping of submitted form values so
the same checks back the ``/registration`` API, the final ``/auth/register``
call and the client-side :class:`athlnet.client.RegistrationWizard`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email

from .constants import MAX_BIO_LENGTH, ROLES

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True, slots=True)
class RegistrationStep:
    number: int
    title: str
    description: str


REGISTRATION_STEPS: tuple[RegistrationStep, ...] = (
    RegistrationStep(1, "Account Type", "Choose your role"),
    RegistrationStep(2, "Personal Info", "Basic information"),
    RegistrationStep(3, "Sports Details", "Your sports background"),
    RegistrationStep(4, "Achievements", "Upload documents"),
    RegistrationStep(5, "Privacy & Terms", "Final settings"),
)

TOTAL_STEPS = len(REGISTRATION_STEPS)

# (field, message) pairs required per role on the sports details step
_ROLE_REQUIREMENTS: dict[str, tuple[tuple[str, str], ...]] = {
    "athlete": (
        ("primary_sport", "Primary sport is required"),
        ("skill_level", "Skill level is required"),
        ("experience", "Experience is required"),
    ),
    "coach": (
        ("specialization", "Coaching specialization is required"),
        ("coaching_experience", "Coaching experience is required"),
    ),
    "sponsor": (
        ("company_name", "Company name is required"),
        ("industry", "Industry is required"),
    ),
    "fan": (),
}

_CONSENTS: tuple[tuple[str, str], ...] = (
    ("accept_terms", "You must accept the Terms of Service"),
    ("accept_privacy", "You must accept the Privacy Policy"),
    ("age_confirmation", "You must confirm your age"),
)


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def is_valid_email(email: str) -> bool:
    """Apply the same check as pydantic's ``EmailStr`` so login accepts it later."""

    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _validate_account_type(data: Mapping[str, Any]) -> dict[str, str]:
    role = _text(data, "role").lower()
    if not role:
        return {"role": "Please select your account type"}
    if role not in ROLES:
        return {"role": "Please select a valid account type"}
    return {}


def _validate_personal_info(data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not _text(data, "first_name"):
        errors["first_name"] = "First name is required"
    if not _text(data, "last_name"):
        errors["last_name"] = "Last name is required"

    email = _text(data, "email")
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"

    if not _text(data, "date_of_birth"):
        errors["date_of_birth"] = "Date of birth is required"
    if not _text(data, "city"):
        errors["city"] = "City is required"
    if not _text(data, "country"):
        errors["country"] = "Country is required"

    bio = data.get("bio") or ""
    if not str(bio).strip():
        errors["bio"] = "Bio is required"
    elif len(str(bio)) > MAX_BIO_LENGTH:
        errors["bio"] = f"Bio must be less than {MAX_BIO_LENGTH} characters"

    password = data.get("password") or ""
    confirm_password = data.get("confirm_password") or ""
    if not isinstance(password, str) or not isinstance(confirm_password, str):
        errors["password"] = "Password must be text"
        return errors
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    return errors


def _validate_sports_details(data: Mapping[str, Any]) -> dict[str, str]:
    role = _text(data, "role").lower()
    return {field: message for field, message in _ROLE_REQUIREMENTS.get(role, ()) if not _text(data, field)}


def _validate_privacy(data: Mapping[str, Any]) -> dict[str, str]:
    for field, message in _CONSENTS:
        if not data.get(field):
            return {"terms": message}
    return {}


_VALIDATORS = {
    1: _validate_account_type,
    2: _validate_personal_info,
    3: _validate_sports_details,
    4: lambda data: {},
    5: _validate_privacy,
}


def validate_step(step: int, data: Mapping[str, Any]) -> dict[str, str]:
    """Return a ``field -> message`` map of problems for ``step`` (empty when valid)."""

    validator = _VALIDATORS.get(step)
    if validator is None:
        raise ValueError(f"Unknown registration step {step}; expected 1..{TOTAL_STEPS}")
    return validator(data)


def validate_all_steps(data: Mapping[str, Any]) -> dict[str, str]:
    """Run every step's rules and merge the resulting errors."""

    errors: dict[str, str] = {}
    for step in range(1, TOTAL_STEPS + 1):
        errors.update(validate_step(step, data))
    return errors


def first_invalid_step(data: Mapping[str, Any]) -> int | None:
    for step in range(1, TOTAL_STEPS + 1):
        if validate_step(step, data):
            return step
    return None


__all__ = [
    "RegistrationStep",
    "REGISTRATION_STEPS",
    "TOTAL_STEPS",
    "MIN_PASSWORD_LENGTH",
    "is_valid_email",
    "validate_step",
    "validate_all_steps",
    "first_invalid_step",
]
