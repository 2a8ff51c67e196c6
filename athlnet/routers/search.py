"""Search and discovery API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    SavedSearchCreate,
    SavedSearchListResponse,
    SavedSearchResponse,
    SearchResponse,
    SuggestionResponse,
    UserSearchResult,
)
from ..services import get_current_user, get_optional_user, search_users, suggested_users, users_by_sport
from ..services.search_service import create_saved_search, delete_saved_search, list_saved_searches

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/users", response_model=SearchResponse)
async def search_users_endpoint(
    q: str = Query(default=""),
    role: str | None = Query(default=None),
    sport: str | None = Query(default=None),
    location: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> SearchResponse:
    filters = {"role": role, "sport": sport, "location": location}
    results = search_users(db, q, viewer_id=viewer.id if viewer else None, filters=filters, limit=limit)
    return SearchResponse(query=q, results=[UserSearchResult(**item) for item in results])


@router.get("/suggestions", response_model=SuggestionResponse)
async def suggestions_endpoint(
    limit: int = Query(default=12, ge=1, le=50),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> SuggestionResponse:
    items = suggested_users(db, viewer=current_user, limit=limit)
    return SuggestionResponse(items=[UserSearchResult(**item) for item in items])


@router.get("/sports/{sport}", response_model=SuggestionResponse)
async def users_by_sport_endpoint(
    sport: str,
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_session),
) -> SuggestionResponse:
    items = users_by_sport(db, sport, limit=limit)
    return SuggestionResponse(items=[UserSearchResult(**item) for item in items])


@router.get("/saved", response_model=SavedSearchListResponse)
async def list_saved_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> SavedSearchListResponse:
    items = list_saved_searches(db, user_id=current_user.id)
    return SavedSearchListResponse(items=[SavedSearchResponse.model_validate(item) for item in items])


@router.post("/saved", response_model=SavedSearchResponse, status_code=status.HTTP_201_CREATED)
async def create_saved_endpoint(
    payload: SavedSearchCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> SavedSearchResponse:
    saved = create_saved_search(db, user_id=current_user.id, name=payload.name, criteria=payload.criteria)
    return SavedSearchResponse.model_validate(saved)


@router.delete("/saved/{search_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_endpoint(
    search_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    delete_saved_search(db, user_id=current_user.id, search_id=search_id)


__all__ = ["router"]
