"""
Tests for file storage adapters.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from adapters.storage.file_storage import (
    LocalFileStorage,
    S3FileStorage,
    StorageError,
    build_storage_adapter,
)


async def _collect(stream) -> bytes:
    return b"".join([chunk async for chunk in stream])


class TestLocalFileStorage:
    """Tests for LocalFileStorage."""

    @pytest.fixture
    def storage(self, tmp_path):
        return LocalFileStorage(base_path=str(tmp_path / "uploads"))

    @pytest.mark.asyncio
    async def test_save_creates_directory_and_file(self, storage):
        key = await storage.save(b"col1,col2\n1,2\n", "abc123.csv")

        assert key == "abc123.csv"
        assert storage.path_for(key).is_file()
        assert await storage.exists(key) is True

    @pytest.mark.asyncio
    async def test_exists_false_for_unknown_key(self, storage):
        assert await storage.exists("nothing-here.pdf") is False

    @pytest.mark.asyncio
    async def test_stream_yields_all_bytes_in_chunks(self, storage):
        payload = bytes(range(256)) * 10
        await storage.save(payload, "blob.bin")

        chunks = [c async for c in storage.stream("blob.bin", chunk_size=100)]

        assert len(chunks) == 26
        assert b"".join(chunks) == payload

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        await storage.save(b"x", "gone.pdf")
        assert await storage.delete("gone.pdf") is True
        assert await storage.exists("gone.pdf") is False
        assert await storage.delete("gone.pdf") is False

    @pytest.mark.parametrize("key", ["../secret.pdf", "nested/file.pdf", "", ".."])
    def test_rejects_keys_outside_root(self, storage, key):
        with pytest.raises(StorageError):
            storage.path_for(key)


class TestS3FileStorage:
    """Tests for S3FileStorage with a mocked boto3 client."""

    @pytest.fixture
    def s3_client(self):
        return MagicMock()

    @pytest.fixture
    def storage(self, s3_client):
        with patch("adapters.storage.file_storage.boto3.client", return_value=s3_client):
            return S3FileStorage(bucket="assets", region="eu-west-1", access_key="k", secret_key="s")

    @pytest.mark.asyncio
    async def test_save_puts_object_under_prefix(self, storage, s3_client):
        await storage.save(b"%PDF", "f00d.pdf", content_type="application/pdf")

        s3_client.put_object.assert_called_once_with(
            Bucket="assets", Key="uploads/f00d.pdf", Body=b"%PDF", ContentType="application/pdf"
        )

    @pytest.mark.asyncio
    async def test_exists_maps_404_to_false(self, storage, s3_client):
        s3_client.head_object.side_effect = ClientError({"Error": {"Code": "404"}}, "HeadObject")
        assert await storage.exists("missing.pdf") is False

    @pytest.mark.asyncio
    async def test_exists_other_errors_raise(self, storage, s3_client):
        s3_client.head_object.side_effect = ClientError({"Error": {"Code": "403"}}, "HeadObject")
        with pytest.raises(StorageError):
            await storage.exists("forbidden.pdf")

    @pytest.mark.asyncio
    async def test_stream_reads_body(self, storage, s3_client):
        body = MagicMock()
        body.read.side_effect = [b"ab", b"cd", b""]
        s3_client.get_object.return_value = {"Body": body}

        assert await _collect(storage.stream("f.pdf", chunk_size=2)) == b"abcd"
        body.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_save_without_bucket_fails(self, s3_client):
        with patch("adapters.storage.file_storage.boto3.client", return_value=s3_client):
            storage = S3FileStorage(bucket="", region="eu-west-1")
        storage.bucket = None
        with pytest.raises(StorageError):
            await storage.save(b"x", "x.pdf")


class TestBuildStorageAdapter:
    def test_local_by_default(self):
        with patch("adapters.storage.file_storage.settings") as mock_settings:
            mock_settings.storage_type = "local"
            mock_settings.storage_local_path = "./public/uploads"
            assert isinstance(build_storage_adapter(), LocalFileStorage)

    def test_s3_without_bucket_falls_back_to_local(self):
        with patch("adapters.storage.file_storage.settings") as mock_settings:
            mock_settings.storage_type = "s3"
            mock_settings.s3_bucket = None
            mock_settings.storage_local_path = "./public/uploads"
            assert isinstance(build_storage_adapter(), LocalFileStorage)
