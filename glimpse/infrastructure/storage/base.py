"""Abstract object storage interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ...config import PHOTOS_FOLDER


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ObjectNotFoundError(StorageError):
    """Object not found in storage."""
    pass


class UploadError(StorageError):
    """Failed to upload object."""
    pass


class DownloadError(StorageError):
    """Failed to download object."""
    pass


class DeleteError(StorageError):
    """Failed to delete object."""
    pass


@dataclass
class StorageConfig:
    """Storage configuration."""
    backend: str  # 'local', 's3', 'minio'

    # Local storage settings
    base_path: Optional[Path] = None
    public_url: str = "/media"

    # S3/MinIO settings
    endpoint_url: Optional[str] = None
    bucket_name: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    use_ssl: bool = True

    def __post_init__(self):
        if self.backend == "local" and self.base_path is None:
            from ...config import STORAGE_BASE_PATH
            self.base_path = Path(STORAGE_BASE_PATH)


class ObjectStorage(ABC):
    """Key -> blob store. Objects are addressed as ``{folder}/{file_id}``.

    Implementations:
    - LocalStorage: Filesystem storage served under a URL prefix
    - S3Storage: AWS S3 / MinIO / DigitalOcean Spaces
    """

    @abstractmethod
    async def upload(
        self,
        file_id: str,
        content: Union[bytes, BinaryIO],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        """Upload content to storage.

        Returns:
            Storage key of the uploaded object

        Raises:
            UploadError: If upload fails
        """
        pass

    @abstractmethod
    async def upload_file(
        self,
        file_id: str,
        local_path: Union[str, Path],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        """Stream a local file into storage.

        Returns:
            Storage key of the uploaded object

        Raises:
            UploadError: If the file can't be read or the upload fails
        """
        pass

    @abstractmethod
    async def download(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bytes:
        """Download an object.

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            DownloadError: If download fails
        """
        pass

    @abstractmethod
    async def delete(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        """Delete an object.

        Returns:
            True if deleted, False if it didn't exist

        Raises:
            DeleteError: If deletion fails for other reasons
        """
        pass

    @abstractmethod
    def exists(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        """Check if an object exists."""
        pass

    @abstractmethod
    def get_url(self, file_id: str, folder: str = PHOTOS_FOLDER) -> str:
        """Publicly resolvable URL for an object."""
        pass

    @abstractmethod
    def parse_url(self, url: str) -> tuple[str, str]:
        """Map a URL produced by ``get_url`` back to ``(folder, file_id)``.

        Raises:
            StorageError: If the URL doesn't belong to this storage
        """
        pass

    async def delete_by_url(self, url: str) -> bool:
        """Delete the object a URL points to.

        Returns:
            True if deleted, False if it didn't exist
        """
        folder, file_id = self.parse_url(url)
        return await self.delete(file_id, folder)

    @staticmethod
    def _safe_id(file_id: str) -> str:
        """Strip any directory components from a file id."""
        safe_id = Path(file_id).name
        if not safe_id:
            raise StorageError(f"Invalid file id: {file_id!r}")
        return safe_id
