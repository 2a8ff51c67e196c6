"""Integration tests for member search, suggestions, saved searches, follows and profiles."""
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
from athlnet.models import Follow, Notification, Post, SavedSearch, User  # noqa: E402
from athlnet.services import get_current_user, get_optional_user, search_users  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (SavedSearch, Follow, Notification, Post, User):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(name: str, *, role: str = "athlete", sports=(), city: str = "", title: str = "") -> User:
        info = {"sports": list(sports), "city": city, "title": title}
        if sports:
            info["primary_sport"] = sports[0]
        with SessionLocal() as session:
            user = User(
                email=f"{uuid4().hex[:8]}@athlnet.io",
                hashed_password="test-hash",
                display_name=name,
                role=role,
                personal_info=info,
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


def test_short_terms_return_nothing(user_factory):
    user_factory("Ava Stone", sports=["Track"])
    with SessionLocal() as session:
        assert search_users(session, "a") == []
        assert search_users(session, " ") == []
        assert search_users(session, None) == []


def test_name_matches_rank_before_other_matches(authed_client, user_factory):
    viewer = user_factory("Viewer")
    user_factory("Zed Runner", sports=["Cycling"])
    user_factory("Bea", sports=["Running"])
    user_factory("Al Running", sports=["Swimming"])

    response = authed_client(viewer).get("/search/users", params={"q": "run"})
    names = [item["display_name"] for item in response.json()["results"]]
    assert names == ["Al Running", "Zed Runner", "Bea"]


def test_search_matches_title_location_and_filters(authed_client, user_factory):
    viewer = user_factory("Viewer")
    user_factory("Kim", role="coach", sports=["Rowing"], city="Boston", title="Head coach")
    user_factory("Lou", role="athlete", sports=["Rowing"], city="Denver")

    client = authed_client(viewer)
    by_title = client.get("/search/users", params={"q": "head coach"}).json()["results"]
    assert [item["display_name"] for item in by_title] == ["Kim"]
    assert by_title[0]["title"] == "Head coach"

    by_city = client.get("/search/users", params={"q": "denver"}).json()["results"]
    assert [item["display_name"] for item in by_city] == ["Lou"]

    coaches = client.get("/search/users", params={"q": "rowing", "role": "coach"}).json()["results"]
    assert [item["display_name"] for item in coaches] == ["Kim"]


def test_suggestions_rank_by_sports_and_location(authed_client, user_factory):
    viewer = user_factory("Viewer", sports=["Track", "Cycling"], city="Austin")
    followed = user_factory("Already Followed", sports=["Track", "Cycling"], city="Austin")
    user_factory("Same City", sports=["Golf"], city="Austin")
    user_factory("Two Sports", sports=["Track", "Cycling"], city="Paris")
    user_factory("Alpha None")
    user_factory("Beta None")

    client = authed_client(viewer)
    assert client.post(f"/follows/{followed.id}").status_code == 201

    items = client.get("/search/suggestions").json()["items"]
    assert [(item["display_name"], item["score"]) for item in items] == [
        ("Two Sports", 4),
        ("Same City", 3),
        ("Alpha None", 0),
        ("Beta None", 0),
    ]


def test_users_by_sport(authed_client, user_factory):
    viewer = user_factory("Viewer")
    user_factory("Ola", sports=["Swimming"])
    user_factory("Ben", sports=["Track", "Swimming"])
    items = authed_client(viewer).get("/search/sports/swim").json()["items"]
    assert [item["display_name"] for item in items] == ["Ben", "Ola"]


def test_saved_searches_are_private(authed_client, user_factory):
    owner = user_factory("Owner")
    other = user_factory("Other")

    client = authed_client(owner)
    created = client.post("/search/saved", json={"name": "Austin runners", "criteria": {"q": "run", "location": "Austin"}})
    assert created.status_code == 201
    search_id = created.json()["id"]
    assert [item["name"] for item in client.get("/search/saved").json()["items"]] == ["Austin runners"]

    client = authed_client(other)
    assert client.get("/search/saved").json()["items"] == []
    assert client.delete(f"/search/saved/{search_id}").status_code == 404

    client = authed_client(owner)
    assert client.delete(f"/search/saved/{search_id}").status_code == 204
    assert client.get("/search/saved").json()["items"] == []


def test_follow_unfollow_and_network(authed_client, user_factory):
    ava = user_factory("Ava")
    leo = user_factory("Leo")
    client = authed_client(ava)

    first = client.post(f"/follows/{leo.id}").json()
    assert first["status"] == "followed"
    assert first["followers_count"] == 1
    assert first["is_following"] is True
    assert client.post(f"/follows/{leo.id}").json()["status"] == "noop"
    assert client.post(f"/follows/{ava.id}").status_code == 400
    assert client.post(f"/follows/{uuid4()}").status_code == 404

    network = client.get(f"/follows/network/{leo.id}").json()
    assert [item["display_name"] for item in network["followers"]] == ["Ava"]
    assert network["following"] == []

    results = client.get("/search/users", params={"q": "leo"}).json()["results"]
    assert results[0]["is_following"] is True
    assert results[0]["followers_count"] == 1

    undo = client.delete(f"/follows/{leo.id}").json()
    assert undo["status"] == "unfollowed"
    assert undo["followers_count"] == 0
    assert client.delete(f"/follows/{leo.id}").json()["status"] == "noop"


def test_profiles_hide_email_from_other_members(authed_client, user_factory):
    ava = user_factory("Ava", sports=["Track"], city="Austin")
    leo = user_factory("Leo")

    own = authed_client(ava).get("/profiles/me").json()
    assert own["is_own_profile"] is True
    assert own["email"] == ava.email

    seen = authed_client(leo).get(f"/profiles/{ava.id}").json()
    assert seen["email"] is None
    assert seen["is_own_profile"] is False
    assert seen["primary_sport"] == "Track"
    assert authed_client(leo).get(f"/profiles/{uuid4()}").status_code == 404


def test_profile_update_merges_personal_info(authed_client, user_factory):
    ava = user_factory("Ava", sports=["Track"], city="Austin")
    client = authed_client(ava)

    updated = client.put(
        "/profiles/me",
        json={"display_name": "  Ava S.  ", "photo_url": "", "personal_info": {"bio": "Sprinter"}},
    ).json()
    assert updated["display_name"] == "Ava S."
    assert updated["bio"] == "Sprinter"
    assert updated["location"] == "Austin"
    assert updated["photo_url"] is None

    client.post("/posts/", json={"content": "hello"})
    posts = client.get(f"/profiles/{ava.id}/posts").json()["items"]
    assert [item["content"] for item in posts] == ["hello"]
