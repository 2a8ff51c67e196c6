"""Business logic for authentication, session tokens and role checks."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional, Tuple
from uuid import UUID

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import SESSION_COOKIE_NAME
from ..database import get_session
from ..models import User
from ..registration import validate_all_steps
from ..schemas import RegisterRequest
from ..security.secrets import MissingSecretError, require_secret
from .profile_service import user_summary

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
DEFAULT_TOKEN_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))

# Wizard fields copied into the stored personal_info document.
_PERSONAL_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "city",
    "country",
    "bio",
    "phone",
    "gender",
    "title",
    "primary_sport",
    "sports",
    "skill_level",
    "experience",
    "specialization",
    "coaching_experience",
    "company_name",
    "industry",
)


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return _pwd_context.verify(password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be verified")
        return False


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT holding the provided ``subject``."""

    expire_delta = timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(subject), "exp": now + expire_delta, "iat": now}
    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


def _personal_info_from(payload: RegisterRequest) -> dict[str, Any]:
    data = payload.model_dump()
    info: dict[str, Any] = {}
    for field in _PERSONAL_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, "", []):
            info[field] = value
    return info


def register_user(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    """Validate the complete wizard submission, persist the member and issue a token."""

    errors = validate_all_steps(payload.model_dump())
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Registration details are incomplete", "errors": errors},
        )

    email = payload.email.strip().lower()
    existing = db.scalar(select(User).where(func.lower(User.email) == email))
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    first = payload.first_name.strip()
    last = payload.last_name.strip()
    privacy = dict(payload.privacy_settings)
    privacy.update(
        {
            "accept_terms": payload.accept_terms,
            "accept_privacy": payload.accept_privacy,
            "age_confirmation": payload.age_confirmation,
        }
    )

    user = User(
        email=email,
        hashed_password=hash_password(payload.password),
        display_name=f"{first} {last}".strip(),
        photo_url=payload.photo_url or None,
        role=payload.role.strip().lower(),
        personal_info=_personal_info_from(payload),
        privacy_settings=privacy,
        achievements=list(payload.achievements),
        is_online=True,
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to register user") from exc

    logger.info("Registered %s account %s", user.role, user.id)
    return user, create_access_token(user.id)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user against stored credentials."""

    user = db.scalar(select(User).where(func.lower(User.email) == email.strip().lower()))
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def _token_from(credentials: HTTPAuthorizationCredentials | None, session_token: str | None) -> str | None:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    if session_token:
        return session_token
    return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated user from a bearer token or the session cookie."""

    token = _token_from(credentials, session_token)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        user.last_active_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to update last_active_at for user %s", user.id)

    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_session),
) -> User | None:
    """Return the authenticated user when a valid token is present."""

    token = _token_from(credentials, session_token)
    if not token:
        return None
    try:
        user_id = decode_access_token(token)
    except HTTPException:
        return None
    return db.get(User, user_id)


def require_roles(*allowed_roles: str):
    normalized = {role.lower() for role in allowed_roles if role}

    async def _resolver(user: User = Depends(get_current_user)) -> User:
        role = (user.role or "").lower()
        if normalized and role not in normalized:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _resolver


def session_state(user: User | None) -> dict[str, Any]:
    """The shared auth-state value pages and clients read."""

    return {
        "user": user_summary(user) if user is not None else None,
        "loading": False,
        "is_authenticated": user is not None,
    }


__all__ = [
    "register_user",
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "get_current_user",
    "get_optional_user",
    "require_roles",
    "session_state",
]
