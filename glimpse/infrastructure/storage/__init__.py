"""Object storage abstraction for photo files.

Supports multiple backends: local filesystem, S3, MinIO.
"""
from .base import (
    DeleteError,
    DownloadError,
    ObjectNotFoundError,
    ObjectStorage,
    StorageConfig,
    StorageError,
    UploadError,
)
from .local_storage import LocalStorage
from .s3_storage import S3Storage
from .factory import get_storage, get_storage_config, get_storage_from_config

__all__ = [
    "DeleteError",
    "DownloadError",
    "ObjectNotFoundError",
    "ObjectStorage",
    "StorageConfig",
    "StorageError",
    "UploadError",
    "LocalStorage",
    "S3Storage",
    "get_storage",
    "get_storage_config",
    "get_storage_from_config",
]
