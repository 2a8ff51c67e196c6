"""Integration tests for the feed, likes, comments and engagement counters."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402
from athlnet.models import CommentLike, Notification, Post, PostComment, PostLike, User  # noqa: E402
from athlnet.services import get_current_user, get_optional_user, trending_hashtags  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (CommentLike, PostLike, PostComment, Post, Notification, User):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(name: str, **fields) -> User:
        with SessionLocal() as session:
            user = User(
                email=f"{name.lower()}-{uuid4().hex[:6]}@athlnet.io",
                hashed_password="test-hash",
                display_name=name,
                **fields,
            )
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
            app.dependency_overrides[get_optional_user] = lambda: user
            return client

        yield _with_user
    app.dependency_overrides.clear()


def test_create_post_requires_text_or_media(authed_client, user_factory):
    client = authed_client(user_factory("Maya"))

    assert client.post("/posts/", json={"content": "   "}).status_code == 422

    media_only = client.post("/posts/", json={"media": [{"url": "https://cdn.athlnet.io/run.jpg"}]})
    assert media_only.status_code == 201
    assert media_only.json()["media"] == [{"url": "https://cdn.athlnet.io/run.jpg", "type": "image"}]

    created = client.post("/posts/", json={"content": "  Tempo run done  "})
    assert created.status_code == 201
    body = created.json()
    assert body["content"] == "Tempo run done"
    assert body["likes"] == []
    assert body["author"]["display_name"] == "Maya"


def test_feed_is_newest_first(authed_client, user_factory):
    client = authed_client(user_factory("Maya"))
    for text in ("first", "second", "third"):
        client.post("/posts/", json={"content": text})

    items = client.get("/posts/feed").json()["items"]
    assert [item["content"] for item in items] == ["third", "second", "first"]
    assert [item["content"] for item in client.get("/posts/feed", params={"limit": 2}).json()["items"]] == [
        "third",
        "second",
    ]


def test_liking_twice_records_one_like(authed_client, user_factory):
    author = user_factory("Maya")
    fan = user_factory("Leo")
    post_id = authed_client(author).post("/posts/", json={"content": "PB today"}).json()["id"]

    client = authed_client(fan)
    first = client.post(f"/posts/{post_id}/likes").json()
    second = client.post(f"/posts/{post_id}/likes").json()
    assert first["like_count"] == second["like_count"] == 1
    assert second["likes"] == [str(fan.id)]
    assert second["viewer_has_liked"] is True

    with SessionLocal() as session:
        assert len(session.scalars(select(PostLike).where(PostLike.user_id == fan.id)).all()) == 1
        notifications = session.scalars(select(Notification).where(Notification.recipient_id == author.id)).all()
        assert [item.type for item in notifications] == ["post.like"]

    removed = client.delete(f"/posts/{post_id}/likes").json()
    assert removed["like_count"] == 0
    assert removed["viewer_has_liked"] is False
    assert client.delete(f"/posts/{post_id}/likes").json()["like_count"] == 0


def test_comments_and_comment_likes(authed_client, user_factory):
    author = user_factory("Maya")
    coach = user_factory("Jordan", role="coach")
    post_id = authed_client(author).post("/posts/", json={"content": "Hill repeats"}).json()["id"]

    client = authed_client(coach)
    comment = client.post(f"/posts/{post_id}/comments", json={"content": "Great session"})
    assert comment.status_code == 201
    comment_id = comment.json()["id"]

    liked = client.post(f"/posts/{post_id}/comments/{comment_id}/likes").json()
    assert liked["like_count"] == 1
    assert client.delete(f"/posts/{post_id}/comments/{comment_id}/likes").json()["like_count"] == 0

    listed = client.get(f"/posts/{post_id}/comments").json()["items"]
    assert [item["content"] for item in listed] == ["Great session"]
    assert client.get(f"/posts/{post_id}").json()["comment_count"] == 1
    assert client.post(f"/posts/{uuid4()}/comments", json={"content": "lost"}).status_code == 404


def test_only_author_can_edit_or_delete(authed_client, user_factory):
    author = user_factory("Maya")
    other = user_factory("Leo")
    post_id = authed_client(author).post("/posts/", json={"content": "draft"}).json()["id"]

    client = authed_client(other)
    assert client.patch(f"/posts/{post_id}", json={"content": "hijack"}).status_code == 403
    assert client.delete(f"/posts/{post_id}").status_code == 403

    client = authed_client(author)
    assert client.patch(f"/posts/{post_id}", json={"content": "final"}).json()["content"] == "final"
    assert client.delete(f"/posts/{post_id}").status_code == 204
    assert client.get(f"/posts/{post_id}").status_code == 404


def test_views_and_shares_increment(authed_client, user_factory):
    client = authed_client(user_factory("Maya"))
    post_id = client.post("/posts/", json={"content": "Race recap"}).json()["id"]

    client.post(f"/posts/{post_id}/views")
    client.post(f"/posts/{post_id}/views")
    shared = client.post(f"/posts/{post_id}/shares").json()
    assert shared["views"] == 2
    assert shared["shares"] == 1


def test_trending_hashtags_counts_each_post_once(authed_client, user_factory):
    client = authed_client(user_factory("Maya"))
    for text in (
        "Track night #Track #sprint #track",
        "Intervals done #track",
        "Pool session #swim",
        "Morning #Sprint drills",
        "No tags here",
    ):
        assert client.post("/posts/", json={"content": text}).status_code == 201

    with SessionLocal() as session:
        assert trending_hashtags(session, limit=2) == [
            {"tag": "#sprint", "posts": 2},
            {"tag": "#track", "posts": 2},
        ]

    response = client.get("/posts/trending")
    assert response.status_code == 200
    assert response.json()["items"] == [
        {"tag": "#sprint", "posts": 2},
        {"tag": "#track", "posts": 2},
        {"tag": "#swim", "posts": 1},
    ]


def test_trending_hashtags_empty_without_tags(authed_client, user_factory):
    client = authed_client(user_factory("Maya"))
    client.post("/posts/", json={"content": "Easy jog"})
    assert client.get("/posts/trending").json() == {"items": []}
    assert client.get("/posts/trending", params={"limit": 0}).status_code == 422
