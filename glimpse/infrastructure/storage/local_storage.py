"""Local filesystem storage implementation."""
from pathlib import Path
from typing import BinaryIO, Optional, Union

import aiofiles

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

CHUNK_SIZE = 64 * 1024


class LocalStorage(ObjectStorage):
    """Local filesystem storage backend.

    Stores objects in directory structure:
        base_path/
            photos/
                <photo_id>

    and resolves them to URLs under ``public_url`` (``/media/photos/<id>``),
    which the web app serves from ``base_path``.
    """

    def __init__(self, config: StorageConfig):
        """Initialize local storage.

        Args:
            config: Storage configuration with base_path
        """
        if config.backend != "local":
            raise ValueError(f"LocalStorage requires backend='local', got '{config.backend}'")

        self.config = config
        self.base_path = Path(config.base_path)
        self.public_url = "/" + config.public_url.strip("/")

        (self.base_path / PHOTOS_FOLDER).mkdir(parents=True, exist_ok=True)

    def path_for(self, file_id: str, folder: str = PHOTOS_FOLDER) -> Path:
        """Filesystem path of an object.

        Raises:
            StorageError: If the path would leave the storage root
        """
        path = (self.base_path / folder / self._safe_id(file_id)).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            raise StorageError(f"Invalid storage path: {folder}/{file_id}")
        return path

    def _get_path(self, file_id: str, folder: str) -> Path:
        return self.path_for(file_id, folder)

    def _key(self, path: Path) -> str:
        return path.relative_to(self.base_path.resolve()).as_posix()

    async def upload(
        self,
        file_id: str,
        content: Union[bytes, BinaryIO],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        """Write content to the filesystem."""
        file_path = self._get_path(file_id, folder)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(file_path, 'wb') as f:
                if isinstance(content, bytes):
                    await f.write(content)
                else:
                    while True:
                        chunk = content.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        await f.write(chunk)
            return self._key(file_path)
        except (IOError, OSError) as e:
            raise UploadError(f"Failed to upload {file_id}: {e}")

    async def upload_file(
        self,
        file_id: str,
        local_path: Union[str, Path],
        folder: str = PHOTOS_FOLDER,
        content_type: Optional[str] = None
    ) -> str:
        """Copy a local file into storage in chunks."""
        file_path = self._get_path(file_id, folder)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(local_path, 'rb') as src:
                async with aiofiles.open(file_path, 'wb') as dst:
                    while True:
                        chunk = await src.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        await dst.write(chunk)
            return self._key(file_path)
        except (IOError, OSError) as e:
            raise UploadError(f"Failed to upload {local_path}: {e}")

    async def download(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bytes:
        """Read an object from the filesystem."""
        file_path = self._get_path(file_id, folder)

        if not file_path.exists():
            raise ObjectNotFoundError(f"Object not found: {folder}/{file_id}")

        try:
            async with aiofiles.open(file_path, 'rb') as f:
                return await f.read()
        except (IOError, OSError) as e:
            raise DownloadError(f"Failed to download {file_id}: {e}")

    async def delete(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        """Remove an object from the filesystem."""
        file_path = self._get_path(file_id, folder)

        if not file_path.exists():
            return False

        try:
            file_path.unlink()
            return True
        except (IOError, OSError) as e:
            raise DeleteError(f"Failed to delete {file_id}: {e}")

    def exists(self, file_id: str, folder: str = PHOTOS_FOLDER) -> bool:
        file_path = self._get_path(file_id, folder)
        return file_path.exists() and file_path.is_file()

    def get_url(self, file_id: str, folder: str = PHOTOS_FOLDER) -> str:
        """URL path under the public prefix, e.g. ``/media/photos/<id>``."""
        return f"{self.public_url}/{folder}/{self._safe_id(file_id)}"

    def parse_url(self, url: str) -> tuple[str, str]:
        prefix = self.public_url + "/"
        if not url.startswith(prefix):
            raise StorageError(f"URL does not belong to local storage: {url}")
        folder, _, file_id = url[len(prefix):].rpartition("/")
        if not folder or not file_id:
            raise StorageError(f"Malformed storage URL: {url}")
        return folder, file_id
