"""Blob storage backends for feature images.

Backends are interchangeable: each stores bytes under a key and returns a
publicly fetchable URL.
"""

import asyncio
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.featuretree.core.config import Settings
from src.featuretree.core.exceptions import StorageError
from src.featuretree.core.logging import get_logger

logger = get_logger(__name__)


class BlobStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...


class LocalBlobStorage:
    """Stores files on the local filesystem, served by the app under ``url_prefix``."""

    def __init__(
        self,
        directory: str | Path,
        url_prefix: str = "/uploads",
        base_url: str | None = None,
    ):
        self.directory = Path(directory)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.base_url = base_url.rstrip("/") if base_url else ""

    def _path_for(self, key: str) -> Path:
        path = (self.directory / key).resolve()
        if self.directory.resolve() not in path.parents:
            raise StorageError(f"Refusing to write outside upload directory: {key}")
        return path

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.exception("Local blob write failed", key=key)
            raise StorageError(f"Failed to store file {key}: {e}") from e
        return f"{self.base_url}{self.url_prefix}/{key}"


class S3BlobStorage:
    """Stores files in an S3-compatible bucket with public-read URLs."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        client: Any = None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        if client is None:
            client_kwargs: dict[str, Any] = {
                "region_name": region,
                "config": Config(
                    retries={"max_attempts": 3, "mode": "standard"},
                    connect_timeout=5,
                    read_timeout=10,
                ),
            }
            # Credentials are optional with IAM roles
            if access_key_id and secret_access_key:
                client_kwargs["aws_access_key_id"] = access_key_id
                client_kwargs["aws_secret_access_key"] = secret_access_key
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **client_kwargs)
        self.client = client

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="public-read",
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.exception("S3 upload failed", key=key, error_code=error_code)
            raise StorageError(f"Failed to upload {key} to S3: {error_code}") from e
        except BotoCoreError as e:
            logger.exception("S3 upload failed", key=key)
            raise StorageError(f"Failed to upload {key} to S3: {e}") from e
        return self.object_url(key)


def build_blob_storage(settings: Settings) -> BlobStorage:
    """Create the backend selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "s3":
        if settings.s3_bucket is None:
            raise StorageError("S3_BUCKET is required when STORAGE_BACKEND=s3")
        return S3BlobStorage(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return LocalBlobStorage(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        base_url=settings.public_base_url,
    )
