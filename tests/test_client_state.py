"""Tests for the client-side state helpers and the API client."""
from __future__ import annotations

import asyncio
import os
from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.client import (  # noqa: E402
    ApiError,
    AthlNetClient,
    ConversationThread,
    DebouncedSearch,
    FeedState,
    RegistrationWizard,
)
from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402

VIEWER = "0b6f3c8e-0000-4000-8000-000000000001"
FRIEND = "0b6f3c8e-0000-4000-8000-000000000002"


def _registration(**overrides):
    data = {
        "role": "athlete",
        "first_name": "Ava",
        "last_name": "Stone",
        "email": "ava@athlnet.io",
        "date_of_birth": "2000-04-02",
        "city": "Austin",
        "country": "USA",
        "bio": "400m sprinter",
        "password": "secret123",
        "confirm_password": "secret123",
        "primary_sport": "Track",
        "sports": ["Track"],
        "skill_level": "advanced",
        "experience": "6 years",
        "accept_terms": True,
        "accept_privacy": True,
        "age_confirmation": True,
    }
    data.update(overrides)
    return data


# feed


def test_like_is_applied_before_the_request_completes():
    feed = FeedState.from_records([{"id": "p1", "likes": [FRIEND]}], viewer_id=VIEWER)
    seen = {}

    def command(post_id, should_like):
        view = feed.posts[post_id]
        seen.update(liked=view.liked, count=view.like_count, should_like=should_like)
        return {"viewer_has_liked": True, "like_count": 2}

    view = feed.toggle_like("p1", command)
    assert seen == {"liked": True, "count": 2, "should_like": True}
    assert (view.liked, view.like_count) == (True, 2)
    assert feed.last_error is None


def test_failed_like_rolls_back():
    feed = FeedState.from_records([{"id": "p1", "likes": [VIEWER]}], viewer_id=VIEWER)

    def command(post_id, should_like):
        raise ApiError(500, "Failed to update like")

    view = feed.toggle_like("p1", command)
    assert (view.liked, view.like_count) == (True, 1)
    assert "Failed to update like" in feed.last_error


def test_like_reconciles_with_server_count():
    feed = FeedState.from_records([{"id": "p1", "likes": []}], viewer_id=VIEWER)
    view = feed.toggle_like("p1", lambda post_id, should_like: {"viewer_has_liked": True, "like_count": 7})
    assert view.like_count == 7


# messaging


def test_thread_send_replaces_pending_message():
    thread = ConversationThread(viewer_id=VIEWER, other_user_id=FRIEND)

    def command(text):
        assert [message.status for message in thread.pending] == ["pending"]
        return {"id": "m1", "content": text, "sender_id": VIEWER}

    stored = thread.send("  Track at six?  ", command)
    assert stored.id == "m1"
    assert stored.content == "Track at six?"
    assert thread.pending == []
    assert [message.id for message in thread.messages] == ["m1"]


def test_thread_send_failure_removes_pending_message():
    thread = ConversationThread(viewer_id=VIEWER, other_user_id=FRIEND)

    def command(text):
        raise httpx.ConnectError("offline")

    assert thread.send("hello", command) is None
    assert thread.messages == []
    assert thread.last_error == "offline"


def test_thread_ignores_blank_messages_and_duplicate_events():
    thread = ConversationThread(
        viewer_id=VIEWER,
        other_user_id=FRIEND,
        messages=[{"id": "m1", "content": "hi", "sender_id": FRIEND}],
    )
    assert thread.send("   ", lambda text: pytest.fail("blank message sent")) is None

    event = {"type": "message_created", "message": {"id": "m1", "content": "hi", "sender_id": FRIEND}}
    assert thread.apply_event(event) is False
    event["message"] = {"id": "m2", "content": "you there?", "sender_id": FRIEND}
    assert thread.apply_event(event) is True
    assert thread.apply_event({"type": "messages_read"}) is False
    assert [message.id for message in thread.messages] == ["m1", "m2"]


# registration wizard


def test_wizard_blocks_until_step_is_valid():
    wizard = RegistrationWizard()
    assert wizard.next() is False
    assert "role" in wizard.errors
    assert wizard.current_step == 1

    wizard.update(role="coach")
    assert wizard.errors == {}
    assert wizard.next() is True
    assert wizard.current_step == 2
    assert wizard.progress == 40


def test_wizard_back_navigation_only_reaches_visited_steps():
    wizard = RegistrationWizard(_registration())
    wizard.next()
    wizard.next()
    assert wizard.current_step == 3

    assert wizard.go_to(5) is False
    assert wizard.go_to(1) is True
    assert wizard.current_step == 1
    wizard.previous()
    assert wizard.current_step == 1


def test_wizard_submit_advances_then_sends():
    wizard = RegistrationWizard(_registration())
    sent = []

    for _ in range(4):
        assert wizard.submit(sent.append) is None
    assert wizard.is_last_step
    assert sent == []

    wizard.submit(lambda data: sent.append(data) or {"access_token": "t"})
    assert wizard.submitted is True
    assert sent[0]["email"] == "ava@athlnet.io"


def test_wizard_submit_jumps_to_first_invalid_step():
    wizard = RegistrationWizard(_registration())
    wizard.current_step = 5
    wizard.update(first_name="")
    assert wizard.submit(lambda data: pytest.fail("invalid data sent")) is None
    assert wizard.current_step == 2
    assert wizard.errors == {"first_name": "First name is required"}


def test_wizard_submit_surfaces_server_errors():
    wizard = RegistrationWizard(_registration())
    wizard.current_step = 5

    def command(data):
        raise ApiError(422, {"message": "Registration details are incomplete", "errors": {"email": "Taken"}})

    wizard.submit(command)
    assert wizard.errors == {"email": "Taken"}
    assert wizard.last_error == "Registration details are incomplete"
    assert wizard.submitted is False


# debounced search


def test_short_terms_never_reach_the_backend():
    calls = []

    async def scenario():
        search = DebouncedSearch(calls.append, delay=0.01)
        search.results = ["stale"]
        search.update("a")
        await search.wait()
        return search

    search = asyncio.run(scenario())
    assert calls == []
    assert search.results == []
    assert search.loading is False


def test_debounce_coalesces_keystrokes():
    calls = []

    async def backend(term):
        calls.append(term)
        return [{"display_name": term.title()}]

    async def scenario():
        search = DebouncedSearch(backend, delay=0.05)
        for term in ("ru", "run", "runn", "runne"):
            search.update(term)
            await asyncio.sleep(0)
        await search.wait()
        return search

    search = asyncio.run(scenario())
    assert calls == ["runne"]
    assert search.results == [{"display_name": "Runne"}]


def test_search_errors_are_recorded():
    def backend(term):
        raise ApiError(503, "search unavailable")

    async def scenario():
        search = DebouncedSearch(backend, delay=0)
        search.update("track")
        await search.wait()
        return search

    search = asyncio.run(scenario())
    assert search.results == []
    assert "search unavailable" in search.last_error


# api client


@pytest.fixture(scope="module")
def _schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def api(_schema) -> Iterator[AthlNetClient]:
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(delete(table))
        session.commit()
    with TestClient(app) as test_client:
        yield AthlNetClient(test_client)


def test_api_client_round_trip(api: AthlNetClient):
    registered = api.register(_registration())
    assert api.token == registered["access_token"]
    assert api.session()["is_authenticated"] is True

    post = api.create_post("Sub-50 today")
    assert [item["id"] for item in api.feed()] == [post["id"]]

    feed = FeedState.from_records(api.feed(), viewer_id=registered["user_id"])
    view = feed.toggle_like(post["id"], api.set_post_like)
    assert (view.liked, view.like_count) == (True, 1)
    view = feed.toggle_like(post["id"], api.set_post_like)
    assert (view.liked, view.like_count) == (False, 0)

    assert api.search_users("a") == []
    assert [result["display_name"] for result in api.search_users("ava")] == ["Ava Stone"]


def test_api_client_raises_api_error(api: AthlNetClient):
    api.register(_registration())
    with pytest.raises(ApiError) as excinfo:
        api.register(_registration())
    assert excinfo.value.status == 409
    assert excinfo.value.detail == "Email already registered"


def test_api_client_wizard_submission(api: AthlNetClient):
    wizard = RegistrationWizard(_registration(email="kai@athlnet.io"))
    wizard.current_step = 5
    result = wizard.submit(api.register)
    assert wizard.submitted is True
    assert result["display_name"] == "Ava Stone"
