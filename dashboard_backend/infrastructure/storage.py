"""Infrastructure layer for blob persistence (S3, local folder, memory)."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dashboard_backend.core.settings import Settings
from dashboard_backend.core.validation import BlobNotFoundError, StorageError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class BlobStore(Protocol):
    """Persistence contract for whole-object reads and writes."""

    def read_text(self, key: str) -> str:
        """Return the object body, raising :class:`BlobNotFoundError` when absent."""

    def write_text(self, key: str, body: str, *, content_type: str = JSON_CONTENT_TYPE) -> None:
        """Replace the object body."""


class InMemoryBlobStore:
    """Simple in-memory store for fast iteration and tests."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(blobs or {})

    def read_text(self, key: str) -> str:
        try:
            return self._blobs[key]
        except KeyError as exc:
            raise BlobNotFoundError(key) from exc

    def write_text(self, key: str, body: str, *, content_type: str = JSON_CONTENT_TYPE) -> None:
        self._blobs[key] = body

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class LocalBlobStore:
    """Store blobs as files below a root folder."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def _path_for(self, key: str) -> Path:
        candidate = (self._root / key).resolve()
        if not candidate.is_relative_to(self._root.resolve()):
            raise StorageError(f"invalid blob key: {key}")
        return candidate

    def read_text(self, key: str) -> str:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc
        except OSError as exc:
            raise StorageError(f"failed to read {key}: {exc}") from exc

    def write_text(self, key: str, body: str, *, content_type: str = JSON_CONTENT_TYPE) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(f".{path.name}.tmp")
            tmp_path.write_text(body, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            raise StorageError(f"failed to write {key}: {exc}") from exc


class S3BlobStore:
    """Store blobs as objects in an S3 bucket."""

    def __init__(self, bucket: str, *, prefix: str = "", client: Any | None = None, region: str | None = None) -> None:
        if not bucket:
            raise ValueError("bucket is required")
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._client = client or boto3.client("s3", region_name=region)

    def _object_key(self, key: str) -> str:
        return f"{self._prefix}/{key}" if self._prefix else key

    def read_text(self, key: str) -> str:
        object_key = self._object_key(key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=object_key)
            return response["Body"].read().decode("utf-8")
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                raise BlobNotFoundError(key) from exc
            raise StorageError(f"S3 read failed for s3://{self._bucket}/{object_key} ({code})") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 read failed for s3://{self._bucket}/{object_key}: {exc}") from exc

    def write_text(self, key: str, body: str, *, content_type: str = JSON_CONTENT_TYPE) -> None:
        object_key = self._object_key(key)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=object_key,
                Body=body.encode("utf-8"),
                ContentType=content_type,
            )
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            raise StorageError(f"S3 write failed for s3://{self._bucket}/{object_key} ({code})") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 write failed for s3://{self._bucket}/{object_key}: {exc}") from exc


def build_blob_store(settings: Settings) -> BlobStore:
    """Create the store selected by ``settings.storage_backend``."""

    if settings.storage_backend == "memory":
        return InMemoryBlobStore()
    if settings.storage_backend == "local":
        return LocalBlobStore(settings.data_root)
    if not settings.s3_bucket:
        raise ValueError("S3 storage requires S3_BUCKET")

    client_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    client = boto3.client("s3", **client_kwargs)
    return S3BlobStore(settings.s3_bucket, prefix=settings.s3_prefix, client=client)


# ----------------------------------------------------------------------
# JSON documents
# ----------------------------------------------------------------------
def read_json(store: BlobStore, key: str) -> Any:
    """Load a JSON document; missing blobs raise :class:`BlobNotFoundError`."""

    body = store.read_text(key)
    if not body.strip():
        raise BlobNotFoundError(key)
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise StorageError(f"stored document {key} is not valid JSON") from exc


def write_json(store: BlobStore, key: str, value: Any) -> None:
    store.write_text(key, json.dumps(value, indent=2, ensure_ascii=False))


def load_json_or_default(store: BlobStore, key: str, default: Any) -> Any:
    """Read path helper: absent or unreadable documents degrade to ``default``."""

    try:
        return read_json(store, key)
    except BlobNotFoundError:
        return default
    except StorageError as exc:
        logger.warning("Falling back to default for %s: %s", key, exc)
        return default
