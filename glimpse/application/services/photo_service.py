"""Photo service - uploads and photo documents."""
import logging
from pathlib import Path
from typing import Optional, Union

from ...config import PHOTOS_FOLDER
from ...errors import UploadError, WriteError, wrap
from ...infrastructure.repositories import PhotoRepository
from ...infrastructure.storage import ObjectStorage
from ...models import Photo, PhotoCreate
from .storage_policy import best_effort_delete

logger = logging.getLogger(__name__)


class PhotoService:
    """Service for photos.

    Responsibilities:
    - Stream local images into object storage under ``photos/{photoId}``
    - Create, list and delete photo documents
    """

    def __init__(self, photo_repository: PhotoRepository, storage: ObjectStorage):
        self.photo_repo = photo_repository
        self.storage = storage

    async def upload_photo(
        self,
        local_image: Union[str, Path],
        photo_id: str,
        content_type: Optional[str] = None
    ) -> str:
        """Upload a local image file.

        Args:
            local_image: Path of the image on disk
            photo_id: Object id, stored as ``photos/{photo_id}``
            content_type: Optional MIME type

        Returns:
            Public URL of the stored object

        Raises:
            UploadError: If the file can't be read or stored
        """
        try:
            await self.storage.upload_file(photo_id, local_image, PHOTOS_FOLDER, content_type)
            url = self.storage.get_url(photo_id, PHOTOS_FOLDER)
        except Exception as e:
            raise wrap("upload photo", e, UploadError) from e

        logger.info("Uploaded photo %s", photo_id)
        return url

    async def add_photo(self, fields: PhotoCreate) -> str:
        """Create a photo document with no likes.

        Returns:
            New photo id
        """
        if fields.thumbnail_url is None:
            fields = fields.model_copy(update={"thumbnail_url": fields.image_url})

        try:
            return await self.photo_repo.create(fields)
        except Exception as e:
            raise wrap("add photo", e, WriteError) from e

    async def get_album_photos(self, album_id: str) -> list[Photo]:
        """Photos of an album, oldest first."""
        try:
            return await self.photo_repo.get_by_album(album_id)
        except Exception as e:
            raise wrap("get album photos", e) from e

    async def delete_photo(self, photo_id: str, image_url: str) -> None:
        """Delete a photo document, then its stored image (best effort)."""
        try:
            await self.photo_repo.delete(photo_id)
        except Exception as e:
            raise wrap("delete photo", e, WriteError) from e

        await best_effort_delete(self.storage, image_url)
        logger.info("Deleted photo %s", photo_id)
