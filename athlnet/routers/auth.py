"""Authentication API routes: register, login, logout and session state."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import SESSION_COOKIE_NAME
from ..database import get_session
from ..models import User
from ..schemas import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest, SessionStateResponse
from ..services import (
    authenticate_user,
    create_access_token,
    get_current_user,
    get_optional_user,
    get_profile,
    register_user,
    resolve_display_name,
    session_state,
)
from ..services.auth_service import DEFAULT_TOKEN_MINUTES
from ..services.profile_service import set_presence

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=DEFAULT_TOKEN_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=get_settings().session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, samesite="lax")


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        access_token=token,
        user_id=user.id,
        role=user.role,
        display_name=resolve_display_name(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user, token = register_user(db, payload)
    set_session_cookie(response, token)
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login_endpoint(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user = authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    set_presence(db, user, online=True)
    token = create_access_token(user.id)
    set_session_cookie(response, token)
    logger.info("User %s signed in", user.id)
    return _auth_response(user, token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout_endpoint(
    db: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_user),
) -> Response:
    if current_user is not None:
        set_presence(db, current_user, online=False)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


@router.get("/session", response_model=SessionStateResponse)
async def session_endpoint(current_user: User | None = Depends(get_optional_user)) -> SessionStateResponse:
    return SessionStateResponse(**session_state(current_user))


@router.get("/me", response_model=ProfileResponse)
async def me_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProfileResponse:
    return ProfileResponse(**get_profile(db, user_id=current_user.id, viewer_id=current_user.id))


__all__ = ["router", "set_session_cookie", "clear_session_cookie"]
