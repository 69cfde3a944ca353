"""Tests for blob storage backends."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from pydantic import ValidationError as SettingsValidationError

from src.featuretree.core.config import Settings
from src.featuretree.core.exceptions import StorageError
from src.featuretree.core.storage import LocalBlobStorage, S3BlobStorage, build_blob_storage

pytestmark = pytest.mark.unit


class TestLocalBlobStorage:
    async def test_writes_file_and_returns_relative_url(self, tmp_path):
        storage = LocalBlobStorage(tmp_path, url_prefix="/uploads")

        url = await storage.put("123-photo.png", b"data", "image/png")

        assert url == "/uploads/123-photo.png"
        assert (tmp_path / "123-photo.png").read_bytes() == b"data"

    async def test_absolute_url_with_base_url(self, tmp_path):
        storage = LocalBlobStorage(
            tmp_path, url_prefix="uploads/", base_url="https://tracker.test/"
        )

        url = await storage.put("a.png", b"x", "image/png")

        assert url == "https://tracker.test/uploads/a.png"

    async def test_creates_missing_directory(self, tmp_path):
        storage = LocalBlobStorage(tmp_path / "nested" / "dir")

        await storage.put("a.png", b"x", "image/png")

        assert (tmp_path / "nested" / "dir" / "a.png").exists()

    async def test_refuses_keys_outside_directory(self, tmp_path):
        storage = LocalBlobStorage(tmp_path / "uploads")

        with pytest.raises(StorageError):
            await storage.put("../escape.png", b"x", "image/png")


class TestS3BlobStorage:
    @pytest.fixture
    def s3_client(self) -> MagicMock:
        return MagicMock()

    async def test_put_object_and_url(self, s3_client):
        storage = S3BlobStorage("tracker-images", region="eu-west-1", client=s3_client)

        url = await storage.put("1-a.png", b"x", "image/png")

        assert url == "https://tracker-images.s3.eu-west-1.amazonaws.com/1-a.png"
        s3_client.put_object.assert_called_once()
        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "tracker-images"
        assert kwargs["Key"] == "1-a.png"
        assert kwargs["ContentType"] == "image/png"

    async def test_custom_endpoint_url(self, s3_client):
        storage = S3BlobStorage(
            "tracker-images", endpoint_url="http://localhost:9000/", client=s3_client
        )

        url = await storage.put("1-a.png", b"x", "image/png")

        assert url == "http://localhost:9000/tracker-images/1-a.png"

    async def test_client_error_becomes_storage_error(self, s3_client):
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3BlobStorage("tracker-images", client=s3_client)

        with pytest.raises(StorageError, match="AccessDenied"):
            await storage.put("1-a.png", b"x", "image/png")


class TestBuildBlobStorage:
    def test_local_backend(self, tmp_path):
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            storage_backend="local",
            upload_dir=str(tmp_path),
        )
        storage = build_blob_storage(settings)
        assert isinstance(storage, LocalBlobStorage)
        assert storage.directory == tmp_path

    def test_s3_backend(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            storage_backend="s3",
            s3_bucket="tracker-images",
            aws_region="us-east-1",
        )
        storage = build_blob_storage(settings)
        assert isinstance(storage, S3BlobStorage)
        assert storage.bucket == "tracker-images"

    def test_s3_backend_requires_bucket(self, monkeypatch):
        monkeypatch.delenv("S3_BUCKET", raising=False)
        with pytest.raises(SettingsValidationError, match="S3_BUCKET is required"):
            Settings(database_url="sqlite+aiosqlite:///:memory:", storage_backend="s3")

    def test_s3_backend_without_bucket_raises(self, settings):
        unchecked = settings.model_copy(update={"storage_backend": "s3", "s3_bucket": None})

        with pytest.raises(StorageError, match="S3_BUCKET is required"):
            build_blob_storage(unchecked)
