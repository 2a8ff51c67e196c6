"""Tests for object-storage uploads with a fake S3 client."""
from __future__ import annotations

import os
from io import BytesIO
from typing import Iterator
from uuid import UUID, uuid4

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_athlnet.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from athlnet.database import Base, SessionLocal, engine  # noqa: E402
from athlnet.main import app  # noqa: E402
from athlnet.models import MediaAsset, User  # noqa: E402
from athlnet.services import get_current_user, storage_service  # noqa: E402

load_storage_config = storage_service.load_storage_config
get_storage_client = storage_service.get_storage_client

_STORAGE_ENV = {
    "STORAGE_KEY": "test-key",
    "STORAGE_SECRET": "test-secret",
    "STORAGE_BUCKET": "athlnet",
    "STORAGE_ENDPOINT": "nyc3.storage.athlnet.io",
    "STORAGE_REGION": "nyc3",
}


class FakeS3Client:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):  # noqa: N803 - boto3 signature
        if self.error is not None:
            raise self.error
        self.calls.append({"bucket": bucket, "key": key, "body": fileobj.read(), "extra": ExtraArgs})


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_state(monkeypatch) -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(MediaAsset))
        session.execute(delete(User))
        session.commit()
    for name in (*_STORAGE_ENV, "STORAGE_PUBLIC_URL"):
        monkeypatch.delenv(name, raising=False)
    load_storage_config.cache_clear()
    get_storage_client.cache_clear()
    yield
    load_storage_config.cache_clear()
    get_storage_client.cache_clear()


@pytest.fixture
def configured_storage(monkeypatch) -> FakeS3Client:
    for name, value in _STORAGE_ENV.items():
        monkeypatch.setenv(name, value)
    fake = FakeS3Client()
    monkeypatch.setattr(storage_service, "get_storage_client", lambda: fake)
    return fake


@pytest.fixture
def test_user() -> User:
    with SessionLocal() as session:
        user = User(email=f"{uuid4().hex[:8]}@athlnet.io", hashed_password="test-hash", display_name="Uploader")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


@pytest.fixture
def client(test_user: User) -> Iterator[TestClient]:
    app.dependency_overrides[get_current_user] = lambda: test_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _png() -> tuple[str, BytesIO, str]:
    return ("sprint.png", BytesIO(b"\x89PNG fake image"), "image/png")


def test_upload_without_configuration_is_unavailable(client: TestClient):
    response = client.post("/upload/", files={"file": _png()})
    assert response.status_code == 503
    assert "STORAGE_BUCKET" in response.json()["detail"]
    assert client.get("/health").json() == {"status": "ok", "storage": "not_configured"}


def test_upload_stores_object_and_asset(client: TestClient, configured_storage: FakeS3Client, test_user: User):
    response = client.post("/upload/", files={"file": _png()}, params={"folder": "posts"})
    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "image"
    assert body["bucket"] == "athlnet"
    assert body["key"].startswith(f"posts/{test_user.id}/")
    assert body["key"].endswith(".png")
    assert body["url"] == f"https://nyc3.storage.athlnet.io/athlnet/{body['key']}"

    [call] = configured_storage.calls
    assert call["body"] == b"\x89PNG fake image"
    assert call["extra"] == {"ACL": "public-read", "ContentType": "image/png"}

    with SessionLocal() as session:
        asset = session.get(MediaAsset, UUID(body["id"]))
        assert asset is not None
        assert asset.user_id == test_user.id
        assert asset.size_bytes == len(b"\x89PNG fake image")
    assert client.get("/health").json()["storage"] == "configured"


def test_upload_failure_maps_to_bad_gateway(client: TestClient, configured_storage: FakeS3Client):
    configured_storage.error = ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
    response = client.post("/upload/", files={"file": _png()})
    assert response.status_code == 502
    with SessionLocal() as session:
        assert session.query(MediaAsset).count() == 0


def test_profile_photo_upload_updates_profile(client: TestClient, configured_storage: FakeS3Client, test_user: User):
    response = client.post("/profiles/me/photo", files={"file": _png()})
    assert response.status_code == 200
    url = response.json()["url"]
    assert f"profiles/{test_user.id}/" in url
    assert client.get("/profiles/me").json()["photo_url"] == url


def test_message_attachment_upload(client: TestClient, configured_storage: FakeS3Client, test_user: User):
    files = {"file": ("plan.pdf", BytesIO(b"%PDF-1.7"), "application/pdf")}
    body = client.post("/messages/attachments", files=files).json()
    assert body["type"] == "file"
    assert body["key"].startswith(f"messages/{test_user.id}/")


def test_public_url_override(monkeypatch, configured_storage: FakeS3Client):
    monkeypatch.setenv("STORAGE_PUBLIC_URL", "https://cdn.athlnet.io/")
    load_storage_config.cache_clear()
    assert storage_service.build_public_url("/a/b.png") == "https://cdn.athlnet.io/a/b.png"


def test_object_keys_are_sanitised():
    key = storage_service.object_key("My Photo.JPG", "../posts//user 1/")
    folder, name = key.rsplit("/", 1)
    assert folder == "posts/user-1"
    assert name.endswith(".jpg")
    assert len(name) == 32 + len(".jpg")
    assert storage_service.object_key("archive.tar.bad$ext", "").startswith("uploads/")
    assert storage_service.object_key(None, "x").count(".") == 0


def test_media_types():
    assert storage_service.media_type_for("video/mp4") == "video"
    assert storage_service.media_type_for("IMAGE/PNG") == "image"
    assert storage_service.media_type_for(None) == "file"
