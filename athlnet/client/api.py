"""Small synchronous API client used by scripts, state helpers and tests."""
from __future__ import annotations

import logging
from typing import Any, Mapping
from uuid import UUID

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(RuntimeError):
    """Raised for any non-2xx response."""

    def __init__(self, status: int, detail: Any) -> None:
        super().__init__(f"{status}: {detail}")
        self.status = status
        self.detail = detail


class AthlNetClient:
    """Wraps an ``httpx.Client`` (or FastAPI's ``TestClient``) with AthlNet calls.

    The bearer token returned by :meth:`login` and :meth:`register` is sent on
    every later request.
    """

    def __init__(
        self,
        http: httpx.Client | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "AthlNetClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.http.request(method, path, headers=headers, **kwargs)
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.debug("%s %s failed with %s", method, path, response.status_code)
            raise ApiError(response.status_code, detail)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # auth
    def login(self, email: str, password: str) -> dict[str, Any]:
        payload = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = payload["access_token"]
        return payload

    def register(self, data: Mapping[str, Any]) -> dict[str, Any]:
        payload = self._request("POST", "/auth/register", json=dict(data))
        self.token = payload["access_token"]
        return payload

    def logout(self) -> None:
        self._request("POST", "/auth/logout")
        self.token = None

    def session(self) -> dict[str, Any]:
        return self._request("GET", "/auth/session")

    def validate_step(self, step: int, data: Mapping[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"/registration/steps/{step}/validate", json={"data": dict(data)})

    # feed
    def feed(self, *, limit: int | None = None) -> list[dict[str, Any]]:
        params = {"limit": limit} if limit else None
        return self._request("GET", "/posts/feed", params=params)["items"]

    def create_post(self, content: str, media: list[dict[str, str]] | None = None) -> dict[str, Any]:
        return self._request("POST", "/posts/", json={"content": content, "media": media or []})

    def set_post_like(self, post_id: UUID | str, liked: bool) -> dict[str, Any]:
        return self._request("POST" if liked else "DELETE", f"/posts/{post_id}/likes")

    def comment(self, post_id: UUID | str, content: str) -> dict[str, Any]:
        return self._request("POST", f"/posts/{post_id}/comments", json={"content": content})

    # messaging
    def conversations(self) -> list[dict[str, Any]]:
        return self._request("GET", "/messages/conversations")["items"]

    def conversation_with(self, user_id: UUID | str, *, limit: int = 50) -> dict[str, Any]:
        return self._request("GET", f"/messages/with/{user_id}", params={"limit": limit})

    def send_message(self, recipient_id: UUID | str, content: str) -> dict[str, Any]:
        return self._request("POST", "/messages/", json={"recipient_id": str(recipient_id), "content": content})

    def mark_read(self, conversation_id: str) -> int:
        return self._request("POST", f"/messages/conversations/{conversation_id}/read")["updated"]

    # discovery
    def search_users(self, term: str, **filters: str) -> list[dict[str, Any]]:
        params = {"q": term, **{key: value for key, value in filters.items() if value}}
        return self._request("GET", "/search/users", params=params)["results"]

    def suggestions(self) -> list[dict[str, Any]]:
        return self._request("GET", "/search/suggestions")["items"]

    def follow(self, user_id: UUID | str) -> dict[str, Any]:
        return self._request("POST", f"/follows/{user_id}")

    def unfollow(self, user_id: UUID | str) -> dict[str, Any]:
        return self._request("DELETE", f"/follows/{user_id}")

    def dashboard(self, time_range: str = "30d") -> dict[str, Any]:
        return self._request("GET", "/analytics/dashboard", params={"range": time_range})


__all__ = ["AthlNetClient", "ApiError", "DEFAULT_BASE_URL"]
