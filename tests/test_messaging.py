"""Integration tests for direct messages, conversations and unread counts."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402
from athlnet.models import Conversation, Message, Notification, User  # noqa: E402
from athlnet.services import conversation_id_for, get_current_user  # noqa: E402
from athlnet.services.message_service import infer_message_type  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (Message, Conversation, Notification, User):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[[str], User]:
    def _factory(name: str) -> User:
        with SessionLocal() as session:
            user = User(email=f"{name.lower()}@athlnet.io", hashed_password="test-hash", display_name=name)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            app.dependency_overrides[get_current_user] = lambda: user
            return client

        yield _with_user
    app.dependency_overrides.clear()


def test_conversation_ids_are_symmetric():
    first, second = uuid4(), uuid4()
    assert conversation_id_for(first, second) == conversation_id_for(second, first)
    assert conversation_id_for(first, second) != conversation_id_for(first, uuid4())


def test_message_type_inference():
    assert infer_message_type("hi", None) == "text"
    assert infer_message_type("", "https://cdn.athlnet.io/photo.JPG?sig=1") == "image"
    assert infer_message_type("", "https://cdn.athlnet.io/plan.pdf") == "file"
    assert infer_message_type("", "https://cdn.athlnet.io/plan.pdf", "image") == "image"


def test_send_and_read_flow(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")

    client = authed_client(ava)
    sent = client.post("/messages/", json={"recipient_id": str(leo.id), "content": "Track at 6?"})
    assert sent.status_code == 201
    conversation_id = sent.json()["conversation_id"]
    assert conversation_id == conversation_id_for(leo.id, ava.id)
    client.post("/messages/", json={"recipient_id": str(leo.id), "content": "Bring spikes"})

    client = authed_client(leo)
    conversations = client.get("/messages/conversations").json()["items"]
    assert len(conversations) == 1
    assert conversations[0]["unread_count"] == 2
    assert conversations[0]["last_message"] == "Bring spikes"
    assert conversations[0]["other_user"]["display_name"] == "Ava"

    thread = client.get(f"/messages/with/{ava.id}").json()
    assert [item["content"] for item in thread["messages"]] == ["Track at 6?", "Bring spikes"]

    marked = client.post(f"/messages/conversations/{conversation_id}/read").json()
    assert marked == {"conversation_id": conversation_id, "updated": 2}
    assert client.get("/messages/conversations").json()["items"][0]["unread_count"] == 0
    assert client.post(f"/messages/conversations/{conversation_id}/read").json()["updated"] == 0


def test_sender_unread_count_is_untouched(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")
    client = authed_client(ava)
    client.post("/messages/", json={"recipient_id": str(leo.id), "content": "ping"})
    assert client.get("/messages/conversations").json()["items"][0]["unread_count"] == 0


def test_invalid_messages_are_rejected(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")
    client = authed_client(ava)

    assert client.post("/messages/", json={"recipient_id": str(leo.id), "content": "   "}).status_code == 422
    assert client.post("/messages/", json={"recipient_id": str(ava.id), "content": "me"}).status_code == 400
    assert client.post("/messages/", json={"recipient_id": str(uuid4()), "content": "ghost"}).status_code == 404


def test_outsiders_cannot_mark_conversations(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")
    eve = user_factory("Eve")
    conversation_id = (
        authed_client(ava).post("/messages/", json={"recipient_id": str(leo.id), "content": "private"}).json()
    )["conversation_id"]

    client = authed_client(eve)
    assert client.post(f"/messages/conversations/{conversation_id}/read").status_code == 403
    assert client.post("/messages/conversations/missing/read").status_code == 404


def test_attachment_summary_for_media_only_message(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")
    client = authed_client(ava)
    response = client.post(
        "/messages/",
        json={"recipient_id": str(leo.id), "media_url": "https://cdn.athlnet.io/plan.pdf"},
    )
    assert response.status_code == 201
    assert response.json()["type"] == "file"
    assert client.get("/messages/conversations").json()["items"][0]["last_message"] == "File attachment"
