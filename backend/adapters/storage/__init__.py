"""Storage adapters for uploaded files."""

from .file_storage import (
    FileStorage,
    LocalFileStorage,
    S3FileStorage,
    StorageError,
    build_storage_adapter,
    get_file_storage,
    storage_adapter,
)

__all__ = [
    "FileStorage",
    "LocalFileStorage",
    "S3FileStorage",
    "StorageError",
    "build_storage_adapter",
    "get_file_storage",
    "storage_adapter",
]
