"""Tests for the analytics dashboard, coaching requests and notifications."""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402
from athlnet.models import Follow, Post, PostComment, PostLike, User  # noqa: E402
from athlnet.services import build_dashboard, get_current_user, get_optional_user  # noqa: E402
from athlnet.services.analytics_service import percent_change, resolve_windows  # noqa: E402
from athlnet.services.notification_service import add_notification  # noqa: E402

NOW = datetime(2026, 5, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(delete(table))
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(name: str, *, role: str = "athlete", **fields) -> User:
        with SessionLocal() as session:
            user = User(
                email=f"{name.lower()}-{uuid4().hex[:6]}@athlnet.io",
                hashed_password="test-hash",
                display_name=name,
                role=role,
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


def test_percent_change():
    assert percent_change(15, 10) == 50.0
    assert percent_change(5, 10) == -50.0
    assert percent_change(3, 0) == 100.0
    assert percent_change(0, 0) == 0.0


def test_resolve_windows_are_adjacent():
    current, previous = resolve_windows("7d", now=NOW)
    assert current.end == NOW
    assert current.start == previous.end == NOW - timedelta(days=7)
    with pytest.raises(HTTPException) as excinfo:
        resolve_windows("1y", now=NOW)
    assert excinfo.value.status_code == 400


def _seed_activity(owner: User, fan: User, coach: User) -> None:
    with SessionLocal() as session:
        recent = Post(author_id=owner.id, content="Race day", media=[], views=10, shares=1, created_at=NOW - timedelta(days=2))
        older = Post(author_id=owner.id, content="Base miles", media=[], views=5, shares=0, created_at=NOW - timedelta(days=40))
        session.add_all([recent, older])
        session.flush()
        session.add(PostLike(post_id=recent.id, user_id=fan.id, created_at=NOW - timedelta(days=1)))
        session.add(PostComment(post_id=recent.id, user_id=fan.id, content="Nice!", created_at=NOW - timedelta(days=1)))
        session.add(Follow(follower_id=coach.id, following_id=owner.id, created_at=NOW - timedelta(days=3)))
        session.commit()


def test_dashboard_kpis_compare_windows(user_factory):
    owner = user_factory("Maya", achievements=[{"title": "State champion"}, {"title": "Marathon PR"}])
    fan = user_factory("Jordan", role="fan")
    coach = user_factory("Coach Lee", role="coach")
    _seed_activity(owner, fan, coach)

    with SessionLocal() as session:
        dashboard = build_dashboard(session, user=session.get(User, owner.id), time_range="30d", now=NOW)

    kpis = {kpi["key"]: kpi for kpi in dashboard["kpis"]}
    assert kpis["profile_views"]["value"] == 10
    assert kpis["profile_views"]["change"] == 100.0
    assert kpis["profile_views"]["trend"] == "up"
    assert kpis["connection_growth"]["value"] == 1
    assert kpis["post_engagement"]["value"] == 20.0
    assert kpis["achievement_score"]["value"] == 20
    assert kpis["achievement_score"]["trend"] == "flat"

    assert len(dashboard["engagement"]) == 30
    assert sum(point["engagement"] for point in dashboard["engagement"]) == 2
    assert sum(point["views"] for point in dashboard["engagement"]) == 10

    [row] = dashboard["content"]
    assert (row["excerpt"], row["reach"], row["engagement"], row["shares"]) == ("Race day", 10, 2, 1)
    assert dashboard["network"] == [{"role": "coach", "count": 1}]


def test_dashboard_endpoint_and_export(authed_client, user_factory):
    owner = user_factory("Maya")
    client = authed_client(owner)

    assert client.get("/analytics/dashboard", params={"range": "1y"}).status_code == 422

    body = client.get("/analytics/dashboard", params={"range": "7d"}).json()
    assert body["time_range"] == "7d"
    assert [kpi["key"] for kpi in body["kpis"]] == [
        "profile_views",
        "connection_growth",
        "post_engagement",
        "achievement_score",
    ]

    client.post("/posts/", json={"content": "Fresh post"})
    export = client.get("/analytics/export.csv")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    lines = export.text.strip().splitlines()
    assert lines[0] == "post_id,excerpt,created_at,reach,engagement,shares,engagement_rate"
    assert "Fresh post" in lines[1]


def test_coaching_request_flow(authed_client, user_factory):
    coach = user_factory("Coach Lee", role="coach")
    athlete = user_factory("Maya")

    created = authed_client(coach).post("/coaching/requests", json={"athlete_id": str(athlete.id), "message": " Join us "})
    assert created.status_code == 201
    request = created.json()
    assert request["status"] == "pending"
    assert request["message"] == "Join us"

    duplicate = authed_client(coach).post("/coaching/requests", json={"athlete_id": str(athlete.id)})
    assert duplicate.status_code == 409

    client = authed_client(athlete)
    inbox = client.get("/coaching/requests").json()
    assert [item["id"] for item in inbox] == [request["id"]]
    assert client.get("/notifications/").json()["items"][0]["type"] == "coaching.request"

    accepted = client.post(f"/coaching/requests/{request['id']}/respond", json={"accept": True})
    assert accepted.json()["status"] == "accepted"
    again = client.post(f"/coaching/requests/{request['id']}/respond", json={"accept": False})
    assert again.status_code == 409
    assert [item["coach"]["id"] for item in client.get("/coaching/coaches").json()] == [str(coach.id)]

    coach_client = authed_client(coach)
    assert [item["athlete"]["id"] for item in coach_client.get("/coaching/athletes").json()] == [str(athlete.id)]
    assert coach_client.get("/notifications/").json()["items"][0]["type"] == "coaching.accepted"
    assert coach_client.post("/coaching/requests", json={"athlete_id": str(athlete.id)}).status_code == 409


def test_coaching_request_rules(authed_client, user_factory):
    coach = user_factory("Coach Lee", role="coach")
    fan = user_factory("Jordan", role="fan")
    athlete = user_factory("Maya")

    assert authed_client(fan).post("/coaching/requests", json={"athlete_id": str(athlete.id)}).status_code == 403
    assert authed_client(coach).post("/coaching/requests", json={"athlete_id": str(fan.id)}).status_code == 400
    assert authed_client(coach).post("/coaching/requests", json={"athlete_id": str(uuid4())}).status_code == 404

    request_id = authed_client(coach).post("/coaching/requests", json={"athlete_id": str(athlete.id)}).json()["id"]
    outsider = authed_client(fan).post(f"/coaching/requests/{request_id}/respond", json={"accept": True})
    assert outsider.status_code == 404


def test_notifications_list_and_mark_read(authed_client, user_factory):
    recipient = user_factory("Maya")
    sender = user_factory("Jordan")
    with SessionLocal() as session:
        first = add_notification(session, recipient_id=recipient.id, sender_id=sender.id, content="one", type_="follow.new")
        add_notification(session, recipient_id=recipient.id, sender_id=sender.id, content="two", type_="post.like")
        assert add_notification(session, recipient_id=sender.id, sender_id=sender.id, content="self") is None
        first_id = first.id

    client = authed_client(recipient)
    listing = client.get("/notifications/").json()
    assert listing["unread_count"] == 2
    assert {item["content"] for item in listing["items"]} == {"one", "two"}

    marked = client.post(f"/notifications/{first_id}/read")
    assert marked.json()["read"] is True
    assert client.get("/notifications/").json()["unread_count"] == 1

    assert authed_client(sender).post(f"/notifications/{first_id}/read").status_code == 404

    assert authed_client(recipient).post("/notifications/mark-read").json() == {"updated": 1}
    assert client.get("/notifications/").json()["unread_count"] == 0
