"""S3-compatible object storage for profile pictures, post media and attachments."""
from __future__ import annotations

import logging
import os
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable
from urllib.parse import urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as OrmSession

from ..constants import STORAGE_NOTICE
from ..models import MediaAsset
from ..security.secrets import MissingSecretError, is_placeholder, missing_variables, require_secret

logger = logging.getLogger(__name__)

_REQUIRED_VARIABLES = ("STORAGE_KEY", "STORAGE_SECRET", "STORAGE_BUCKET", "STORAGE_ENDPOINT")
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class StorageConfig:
    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class StorageUploadResult:
    """Metadata returned after an object has been stored."""

    asset_id: uuid.UUID | None
    url: str
    key: str
    bucket: str
    content_type: str
    media_type: str


class StorageConfigurationError(RuntimeError):
    """Raised when storage credentials are missing or unusable."""


class StorageUploadError(RuntimeError):
    """Raised when an upload to object storage fails."""


def _normalize_endpoint(raw: str, variable: str) -> str:
    endpoint = raw.strip().rstrip("/")
    parsed = urlparse(endpoint)
    if not parsed.scheme:
        endpoint = f"https://{endpoint.lstrip(':/')}"
        parsed = urlparse(endpoint)
    if not (parsed.netloc or parsed.path):
        raise StorageConfigurationError(f"{variable} must include a hostname")
    return parsed.geturl().rstrip("/")


@lru_cache(maxsize=1)
def load_storage_config() -> StorageConfig:
    """Read and validate storage configuration from the environment."""

    missing = missing_variables(_REQUIRED_VARIABLES)
    if missing:
        raise StorageConfigurationError("Missing storage configuration: " + ", ".join(missing))

    try:
        key = require_secret("STORAGE_KEY")
        secret = require_secret("STORAGE_SECRET")
    except MissingSecretError as exc:
        raise StorageConfigurationError(str(exc)) from exc

    bucket = os.environ["STORAGE_BUCKET"].strip()
    region = (os.getenv("STORAGE_REGION") or "").strip()
    if is_placeholder(region):
        region = DEFAULT_REGION

    api_endpoint = _normalize_endpoint(os.environ["STORAGE_ENDPOINT"], "STORAGE_ENDPOINT")
    public_raw = os.getenv("STORAGE_PUBLIC_URL")
    if is_placeholder(public_raw):
        public_endpoint = f"{api_endpoint}/{bucket}"
    else:
        public_endpoint = _normalize_endpoint(public_raw, "STORAGE_PUBLIC_URL")

    return StorageConfig(
        key=key,
        secret=secret,
        region=region,
        bucket=bucket,
        api_endpoint=api_endpoint,
        public_endpoint=public_endpoint,
    )


def storage_notice() -> str | None:
    """Banner text shown when uploads are unavailable, ``None`` when storage is ready."""

    try:
        load_storage_config()
    except StorageConfigurationError as exc:
        logger.debug("Storage unavailable: %s", exc)
        return STORAGE_NOTICE
    return None


@lru_cache(maxsize=1)
def get_storage_client() -> BaseClient:
    config = load_storage_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _sanitize_segments(parts: Iterable[str]) -> list[str]:
    sanitized: list[str] = []
    for part in parts:
        if part in {"", ".", ".."}:
            continue
        cleaned = re.sub(r"[^A-Za-z0-9._-]", "-", part.strip())
        cleaned = re.sub(r"-+", "-", cleaned).strip("-._")
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def object_key(filename: str | None, folder: str) -> str:
    """``<folder>/<random hex><ext>`` with the folder path sanitised."""

    extension = Path(filename or "").suffix.lower()
    if extension and not re.fullmatch(r"\.[A-Za-z0-9]{1,10}", extension):
        extension = ""
    safe_folder = "/".join(_sanitize_segments((folder or "uploads").replace("\\", "/").split("/"))) or "uploads"
    return f"{safe_folder}/{uuid.uuid4().hex}{extension}"


def build_public_url(key: str) -> str:
    config = load_storage_config()
    return f"{config.public_endpoint}/{key.lstrip('/')}"


def media_type_for(content_type: str | None) -> str:
    kind = (content_type or "").split("/", 1)[0].lower()
    if kind in {"image", "video"}:
        return kind
    return "file"


def file_size(file: UploadFile) -> int:
    if getattr(file, "size", None) is not None:
        return int(file.size)
    handle = file.file
    position = handle.tell()
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(position)
    return size


async def upload_file(
    file: UploadFile,
    *,
    folder: str = "uploads",
    client: BaseClient | None = None,
    db: OrmSession | None = None,
    user_id: uuid.UUID | None = None,
) -> StorageUploadResult:
    """Upload ``file`` and, when ``db`` is given, record a :class:`MediaAsset`."""

    config = load_storage_config()
    s3_client = client or get_storage_client()
    key = object_key(file.filename, folder)
    content_type = (file.content_type or "").strip() or "application/octet-stream"
    size = file_size(file)

    def _upload() -> None:
        try:
            file.file.seek(0)
            s3_client.upload_fileobj(
                file.file,
                config.bucket,
                key,
                ExtraArgs={"ACL": "public-read", "ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as exc:
            logger.exception("Upload of %s to object storage failed", key)
            raise StorageUploadError("Upload to object storage failed") from exc

    await run_in_threadpool(_upload)
    url = build_public_url(key)

    asset_id: uuid.UUID | None = None
    if db is not None:
        asset = MediaAsset(
            user_id=user_id,
            key=key,
            url=url,
            bucket=config.bucket,
            content_type=content_type,
            folder=folder,
            size_bytes=size,
        )
        try:
            db.add(asset)
            db.commit()
            db.refresh(asset)
            asset_id = asset.id
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to record media asset %s", key)
            raise StorageUploadError("Uploaded file could not be recorded") from exc

    logger.info("Stored %s (%s, %d bytes)", key, content_type, size)
    return StorageUploadResult(
        asset_id=asset_id,
        url=url,
        key=key,
        bucket=config.bucket,
        content_type=content_type,
        media_type=media_type_for(content_type),
    )


__all__ = [
    "StorageConfig",
    "StorageConfigurationError",
    "StorageUploadError",
    "StorageUploadResult",
    "load_storage_config",
    "storage_notice",
    "get_storage_client",
    "object_key",
    "build_public_url",
    "media_type_for",
    "file_size",
    "upload_file",
]
