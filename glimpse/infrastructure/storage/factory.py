"""Factory for creating object storage backends."""
import os
from pathlib import Path

from ...config import STORAGE_BACKEND, STORAGE_BASE_PATH, STORAGE_PUBLIC_URL
from .base import ObjectStorage, StorageConfig
from .local_storage import LocalStorage


def get_storage_config() -> StorageConfig:
    """Get storage configuration from environment variables.

    Environment variables:
    - STORAGE_BACKEND: 'local' (default), 's3', 'minio'
    - STORAGE_BASE_PATH: Root directory for local storage
    - STORAGE_PUBLIC_URL: URL prefix local objects are served under

    For S3:
    - S3_BUCKET: Bucket name
    - S3_ENDPOINT: Custom endpoint (for MinIO)
    - S3_ACCESS_KEY: Access key
    - S3_SECRET_KEY: Secret key
    - S3_REGION: Region (default: us-east-1)
    - S3_USE_SSL: Use SSL (default: true)
    """
    backend = STORAGE_BACKEND

    if backend == "local":
        return StorageConfig(
            backend="local",
            base_path=Path(STORAGE_BASE_PATH),
            public_url=STORAGE_PUBLIC_URL
        )

    elif backend in ("s3", "minio"):
        bucket = os.environ.get("S3_BUCKET")
        if not bucket:
            raise ValueError("S3_BUCKET environment variable is required for S3 storage")

        return StorageConfig(
            backend=backend,
            bucket_name=bucket,
            endpoint_url=os.environ.get("S3_ENDPOINT"),
            access_key=os.environ.get("S3_ACCESS_KEY"),
            secret_key=os.environ.get("S3_SECRET_KEY"),
            region=os.environ.get("S3_REGION", "us-east-1"),
            use_ssl=os.environ.get("S3_USE_SSL", "true").lower() == "true"
        )

    else:
        raise ValueError(f"Unknown storage backend: {backend}")


def get_storage_from_config(config: StorageConfig) -> ObjectStorage:
    """Create storage backend from configuration."""
    if config.backend == "local":
        return LocalStorage(config)

    elif config.backend in ("s3", "minio"):
        from .s3_storage import S3Storage
        return S3Storage(config)

    else:
        raise ValueError(f"Unknown storage backend: {config.backend}")


def get_storage() -> ObjectStorage:
    """Build the storage backend configured by the environment."""
    return get_storage_from_config(get_storage_config())
