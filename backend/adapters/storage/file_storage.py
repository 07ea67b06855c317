"""
File storage adapters for local and S3 storage.

Uploaded files are addressed by a storage key of the form ``<hash><ext>``,
mirroring how the upload record stores them. Both adapters expose the same
async surface: save, existence check, chunked streaming and delete.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class StorageError(RuntimeError):
    """Raised when the storage backend cannot complete an operation."""


class FileStorage(ABC):
    """Abstract base class for file storage adapters."""

    provider: str = ""

    @abstractmethod
    async def save(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        """
        Store *data* under *key*.

        Returns:
            The storage key actually used
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return True if a file is stored under *key*."""
        pass

    @abstractmethod
    def stream(self, key: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the stored bytes in chunks."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete the file. Returns False if nothing was deleted."""
        pass

    @staticmethod
    def _check_key(key: str) -> str:
        """Reject keys that could escape the storage root."""
        if not key or os.path.basename(key) != key or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return key


class LocalFileStorage(FileStorage):
    """
    Local filesystem storage adapter.

    Files live flat under the uploads directory: ``<base_path>/<hash><ext>``.
    """

    provider = "local"

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or settings.storage_local_path)

    def path_for(self, key: str) -> Path:
        return self.base_path / self._check_key(key)

    async def save(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        file_path = self.path_for(key)
        try:
            await aiofiles.os.makedirs(self.base_path, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error("Failed to save file to local storage: %s", e)
            raise StorageError(f"Failed to save {key}: {e}") from e

        logger.info("Saved file to local storage: %s (%d bytes)", key, len(data))
        return key

    async def exists(self, key: str) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(key))

    async def stream(self, key: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        async with aiofiles.open(self.path_for(key), "rb") as f:
            while True:
                chunk = await f.read(chunk_size)
                if not chunk:
                    break
                yield chunk

    async def delete(self, key: str) -> bool:
        file_path = self.path_for(key)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            logger.warning("File not found for deletion: %s", key)
            return False
        logger.info("Deleted file from local storage: %s", key)
        return True


class S3FileStorage(FileStorage):
    """
    AWS S3 storage adapter.

    boto3 is synchronous; every call runs in a worker thread.
    """

    provider = "s3"

    def __init__(
        self,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        prefix: str = "uploads",
    ):
        self.bucket = bucket or settings.s3_bucket
        self.region = region or settings.s3_region
        self.prefix = prefix.strip("/")
        access_key = access_key or settings.s3_access_key
        secret_key = secret_key or settings.s3_secret_key

        if access_key and secret_key:
            self.s3_client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        else:
            # Default credential chain (IAM role, env vars, ...)
            self.s3_client = boto3.client("s3", region_name=self.region)

        logger.info("S3 file storage initialized for bucket: %s", self.bucket)

    def _object_key(self, key: str) -> str:
        key = self._check_key(key)
        return f"{self.prefix}/{key}" if self.prefix else key

    async def save(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        if not self.bucket:
            raise StorageError("S3 bucket not configured.")

        extra = {"ContentType": content_type} if content_type else {}
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=self._object_key(key),
                Body=data,
                **extra,
            )
        except NoCredentialsError as e:
            logger.error("AWS credentials not found")
            raise StorageError("AWS credentials not configured") from e
        except ClientError as e:
            logger.error("S3 upload failed: %s", e)
            raise StorageError(f"Failed to upload to S3: {e}") from e

        logger.info("Uploaded file to S3: %s", key)
        return key

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(
                self.s3_client.head_object, Bucket=self.bucket, Key=self._object_key(key)
            )
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"Failed to check {key} in S3: {e}") from e
        return True

    async def stream(self, key: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        response = await asyncio.to_thread(
            self.s3_client.get_object, Bucket=self.bucket, Key=self._object_key(key)
        )
        body = response["Body"]
        try:
            while True:
                chunk = await asyncio.to_thread(body.read, chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            body.close()

    async def delete(self, key: str) -> bool:
        try:
            await asyncio.to_thread(
                self.s3_client.delete_object, Bucket=self.bucket, Key=self._object_key(key)
            )
        except ClientError as e:
            logger.error("Failed to delete from S3: %s", e)
            return False
        logger.info("Deleted file from S3: %s", key)
        return True


def build_storage_adapter() -> FileStorage:
    """Create the storage adapter selected by ``settings.storage_type``."""
    storage_type = settings.storage_type.lower()

    if storage_type == "s3":
        if not settings.s3_bucket:
            logger.warning("S3 storage requested but S3_BUCKET not set, falling back to local storage")
            return LocalFileStorage()
        return S3FileStorage()

    if storage_type != "local":
        logger.warning("Unknown storage type '%s', using local storage", storage_type)
    return LocalFileStorage()


# Global storage adapter instance
storage_adapter = build_storage_adapter()


def get_file_storage() -> FileStorage:
    """FastAPI dependency returning the process-wide storage adapter."""
    return storage_adapter
