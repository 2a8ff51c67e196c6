"""Integration tests for sign-up, sign-in and the registration wizard rules."""
from __future__ import annotations

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.constants import SESSION_COOKIE_NAME  # noqa: E402
from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402
from athlnet.models import Notification, User  # noqa: E402
from athlnet.registration import first_invalid_step, validate_all_steps, validate_step  # noqa: E402


def _registration(**overrides):
    data = {
        "role": "athlete",
        "first_name": "Ava",
        "last_name": "Stone",
        "email": "ava@athlnet.io",
        "date_of_birth": "2000-04-02",
        "city": "Austin",
        "country": "USA",
        "bio": "400m sprinter chasing a sub-50.",
        "password": "secret123",
        "confirm_password": "secret123",
        "primary_sport": "Track",
        "sports": ["Track", "Cycling"],
        "skill_level": "advanced",
        "experience": "6 years",
        "accept_terms": True,
        "accept_privacy": True,
        "age_confirmation": True,
    }
    data.update(overrides)
    return data


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(Notification))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def test_step_two_requires_first_name():
    errors = validate_step(2, _registration(first_name="  "))
    assert errors == {"first_name": "First name is required"}


def test_step_two_checks_email_bio_and_passwords():
    errors = validate_step(
        2,
        _registration(email="not-an-email", bio="x" * 501, password="abc", confirm_password="abd"),
    )
    assert errors["email"] == "Please enter a valid email address"
    assert errors["bio"] == "Bio must be less than 500 characters"
    assert errors["password"] == "Password must be at least 6 characters"
    assert errors["confirm_password"] == "Passwords do not match"


def test_step_one_rejects_missing_and_unknown_roles():
    assert validate_step(1, {}) == {"role": "Please select your account type"}
    assert "role" in validate_step(1, {"role": "referee"})
    assert validate_step(1, {"role": "Coach"}) == {}


def test_step_three_depends_on_role():
    assert set(validate_step(3, {"role": "coach"})) == {"specialization", "coaching_experience"}
    assert set(validate_step(3, {"role": "sponsor"})) == {"company_name", "industry"}
    assert validate_step(3, {"role": "fan"}) == {}
    assert validate_step(4, {}) == {}


def test_step_five_reports_first_missing_consent():
    errors = validate_step(5, _registration(accept_terms=True, accept_privacy=False, age_confirmation=False))
    assert errors == {"terms": "You must accept the Privacy Policy"}


def test_unknown_step_is_rejected():
    with pytest.raises(ValueError):
        validate_step(6, {})


def test_first_invalid_step_and_merge():
    data = _registration(skill_level="")
    assert first_invalid_step(data) == 3
    assert validate_all_steps(data) == {"skill_level": "Skill level is required"}
    assert first_invalid_step(_registration()) is None


def test_register_sets_session_cookie_and_profile(client: TestClient):
    response = client.post("/auth/register", json=_registration())
    assert response.status_code == 201
    body = response.json()
    assert body["display_name"] == "Ava Stone"
    assert body["role"] == "athlete"
    assert SESSION_COOKIE_NAME in response.cookies

    session = client.get("/auth/session").json()
    assert session["is_authenticated"] is True
    assert session["loading"] is False
    assert session["user"]["display_name"] == "Ava Stone"

    me = client.get("/auth/me").json()
    assert me["email"] == "ava@athlnet.io"
    assert me["primary_sport"] == "Track"
    assert me["sports"] == ["Track", "Cycling"]
    assert me["location"] == "Austin, USA"


def test_register_reports_wizard_errors(client: TestClient):
    response = client.post("/auth/register", json=_registration(first_name="", accept_terms=False))
    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert errors["first_name"] == "First name is required"
    assert errors["terms"] == "You must accept the Terms of Service"


def test_register_rejects_duplicate_email(client: TestClient):
    assert client.post("/auth/register", json=_registration()).status_code == 201
    duplicate = client.post("/auth/register", json=_registration(email="AVA@athlnet.io"))
    assert duplicate.status_code == 409


def test_login_and_logout(client: TestClient):
    client.post("/auth/register", json=_registration())
    client.cookies.clear()

    bad = client.post("/auth/login", json={"email": "ava@athlnet.io", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"

    good = client.post("/auth/login", json={"email": "Ava@athlnet.io", "password": "secret123"})
    assert good.status_code == 200
    assert good.json()["token_type"] == "bearer"

    assert client.post("/auth/logout").status_code == 204
    client.cookies.clear()
    assert client.get("/auth/session").json() == {"user": None, "loading": False, "is_authenticated": False}
    assert client.get("/auth/me").status_code == 401


def test_bearer_token_authenticates(client: TestClient):
    token = client.post("/auth/register", json=_registration()).json()["access_token"]
    client.cookies.clear()
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_registration_step_endpoints(client: TestClient):
    steps = client.get("/registration/steps").json()
    assert [step["title"] for step in steps] == [
        "Account Type",
        "Personal Info",
        "Sports Details",
        "Achievements",
        "Privacy & Terms",
    ]

    blocked = client.post("/registration/steps/2/validate", json={"data": {"last_name": "Stone"}}).json()
    assert blocked["valid"] is False
    assert blocked["errors"]["first_name"] == "First name is required"
    assert blocked["next_step"] is None

    passed = client.post("/registration/steps/1/validate", json={"data": {"role": "fan"}}).json()
    assert passed == {"step": 1, "valid": True, "errors": {}, "next_step": 2}

    assert client.post("/registration/steps/9/validate", json={"data": {}}).status_code == 404


@pytest.mark.parametrize("email", ["coach@club.local", "ann@athl.test", "Ann Lee@athlnet.io", "ava@athlnet.io trailing"])
def test_step_two_rejects_emails_login_would_refuse(email):
    assert validate_step(2, _registration(email=email))["email"] == "Please enter a valid email address"


def test_register_refuses_unusable_email(client: TestClient):
    response = client.post("/auth/register", json=_registration(email="coach@club.local"))
    assert response.status_code == 422
    assert response.json()["detail"]["errors"]["email"] == "Please enter a valid email address"


def test_registered_account_can_sign_in(client: TestClient):
    assert client.post("/auth/register", json=_registration(email="  Ava.Stone@athlnet.io ")).status_code == 201
    client.cookies.clear()

    login = client.post("/auth/login", json={"email": "ava.stone@athlnet.io", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["display_name"] == "Ava Stone"


def test_step_two_reports_non_text_password():
    errors = validate_step(2, _registration(password=123456, confirm_password=123456))
    assert errors == {"password": "Password must be text"}


def test_step_validate_endpoint_handles_numeric_password(client: TestClient):
    response = client.post(
        "/registration/steps/2/validate",
        json={"data": {"password": 123456, "confirm_password": 123456}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["errors"]["password"] == "Password must be text"
