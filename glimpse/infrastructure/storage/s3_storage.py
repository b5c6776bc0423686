"""S3-compatible storage implementation (AWS S3, MinIO, DigitalOcean Spaces)."""
import asyncio
from pathlib import Path
from typing import BinaryIO, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...config import PHOTOS_FOLDER
from .base import (
    DeleteError,
    DownloadError,
    ObjectNotFoundError,
    ObjectStorage,
    StorageConfig,
    StorageError,
    UploadError,
)


def _error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', 'Unknown')


class S3Storage(ObjectStorage):
    """S3-compatible storage backend.

    boto3 is blocking, so every call runs in a worker thread via
    ``asyncio.to_thread``.
    """

    def __init__(self, config: StorageConfig, client=None):
        """Initialize S3 storage.

        Args:
            config: Storage configuration with S3 settings
            client: Pre-built boto3 S3 client (tests); built from config if None
        """
        if config.backend not in ("s3", "minio"):
            raise ValueError(
                f"S3Storage requires backend='s3' or 'minio', got '{config.backend}'"
            )

        self.config = config
        self.bucket = config.bucket_name

        if client is None:
            client_kwargs = {
                "service_name": "s3",
                "aws_access_key_id": config.access_key,
                "aws_secret_access_key": config.secret_key,
                "region_name": config.region,
            }
            # Custom endpoint for MinIO/DigitalOcean
            if config.endpoint_url:
                client_kwargs["endpoint_url"] = config.endpoint_url
                client_kwargs["use_ssl"] = config.use_ssl
            client = boto3.client(**client_kwargs)

        self.client = client

    @property
    def base_url(self) -> str:
        endpoint = self.config.endpoint_url or f"https://s3.{self.config.region}.amazonaws.com"
        return f"{endpoint.rstrip('/')}/{self.bucket}"

    def _get_key(self, file_id: str, folder: str) -> str:
        return f"{folder}/{self._safe_id(file_id)}"

    async def upload(
        self,
        file_id: str,
        content: Union[bytes, BinaryIO],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        key = self._get_key(file_id, folder)
        extra_args = {'ContentType': content_type} if content_type else {}
        body = content if isinstance(content, bytes) else content.read()

        try:
            await asyncio.to_thread(
                self.client.put_object, Bucket=self.bucket, Key=key, Body=body, **extra_args
            )
            return key
        except (ClientError, BotoCoreError) as e:
            raise UploadError(f"Failed to upload {file_id}: {e}")

    async def upload_file(
        self,
        file_id: str,
        local_path: Union[str, Path],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        """Stream a local file with boto3's managed (multipart) transfer."""
        key = self._get_key(file_id, folder)
        extra_args = {'ContentType': content_type} if content_type else None

        try:
            await asyncio.to_thread(
                self.client.upload_file,
                str(local_path), self.bucket, key, ExtraArgs=extra_args
            )
            return key
        except (ClientError, BotoCoreError, OSError) as e:
            raise UploadError(f"Failed to upload {local_path}: {e}")

    async def download(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bytes:
        key = self._get_key(file_id, folder)

        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket, Key=key
            )
            return await asyncio.to_thread(response['Body'].read)
        except ClientError as e:
            if _error_code(e) == 'NoSuchKey':
                raise ObjectNotFoundError(f"Object not found: {key}")
            raise DownloadError(f"Failed to download {file_id}: {e}")

    async def delete(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        key = self._get_key(file_id, folder)

        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) == 'NoSuchKey':
                return False
            raise DeleteError(f"Failed to delete {file_id}: {e}")

    def exists(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        key = self._get_key(file_id, folder)

        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in ('404', 'NoSuchKey'):
                return False
            raise StorageError(f"Failed to check existence of {file_id}: {e}")

    def get_url(self, file_id: str, folder: str = PHOTOS_FOLDER) -> str:
        """Direct object URL (bucket is expected to allow public reads)."""
        return f"{self.base_url}/{self._get_key(file_id, folder)}"

    def parse_url(self, url: str) -> tuple[str, str]:
        prefix = self.base_url + "/"
        if not url.startswith(prefix):
            raise StorageError(f"URL does not belong to bucket {self.bucket}: {url}")
        folder, _, file_id = url[len(prefix):].rpartition("/")
        if not folder or not file_id:
            raise StorageError(f"Malformed storage URL: {url}")
        return folder, file_id
