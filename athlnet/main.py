"""Application entry point for the AthlNet FastAPI service."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import init_db
from .routers import (
    analytics_router,
    auth_router,
    coaching_router,
    follows_router,
    messages_router,
    notifications_router,
    posts_router,
    profiles_router,
    realtime_router,
    registration_router,
    search_router,
    uploads_router,
)
from .services.storage_service import storage_notice
from .ui.guards import PageAuthRequired
from .ui.router import router as ui_router
from .ui.template_helpers import render_template

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

# Paths served as JSON; everything else is an HTML page.
API_PREFIXES = (
    "/analytics",
    "/api",
    "/assets",
    "/auth",
    "/coaching",
    "/follows",
    "/health",
    "/messages",
    "/notifications",
    "/posts",
    "/profiles",
    "/registration",
    "/search",
    "/upload",
    "/ws",
)

app = FastAPI(title=APP_NAME, version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ui_router)
app.include_router(auth_router)
app.include_router(registration_router)
app.include_router(profiles_router)
app.include_router(follows_router)
app.include_router(posts_router)
app.include_router(messages_router)
app.include_router(search_router)
app.include_router(notifications_router)
app.include_router(coaching_router)
app.include_router(analytics_router)
app.include_router(uploads_router)
app.include_router(realtime_router)


def is_page_request(request: Request) -> bool:
    path = request.url.path
    return not any(path == prefix or path.startswith(prefix + "/") for prefix in API_PREFIXES)


@app.exception_handler(PageAuthRequired)
async def _page_auth_required(request: Request, exc: PageAuthRequired) -> RedirectResponse:
    return RedirectResponse(exc.redirect_to, status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    if not is_page_request(request):
        return await http_exception_handler(request, exc)
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return render_template(request, "not_found.html", {"page_title": "Not found"}, status_code=exc.status_code)
    detail = exc.detail if isinstance(exc.detail, str) else None
    return render_template(
        request,
        "error.html",
        {"page_title": "Something went wrong", "error_title": "We could not complete that action", "error_detail": detail},
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if not is_page_request(request):
        return JSONResponse({"detail": "Internal server error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return render_template(
        request,
        "error.html",
        {
            "page_title": "Something went wrong",
            "error_title": "Something went wrong",
            "error_detail": "Please reload the page. If the problem continues, try again later.",
        },
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.on_event("startup")
async def _startup() -> None:
    """Ensure the database schema exists before serving."""

    try:
        init_db()
    except Exception:
        logger.exception("Database initialisation failed")
        raise

    notice = storage_notice()
    if notice:
        logger.warning(notice)


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok", "storage": "not_configured" if storage_notice() else "configured"}


UI_STATIC_ROOT = Path(__file__).resolve().parent / "ui" / "static"

app.mount("/assets", StaticFiles(directory=str(UI_STATIC_ROOT), check_dir=False), name="assets")


__all__ = ["app", "is_page_request", "API_PREFIXES"]
