"""Album service - album documents and cascading album deletion."""
import asyncio
import logging

from ...errors import NotFoundError, WriteError, wrap
from ...infrastructure.repositories import AlbumRepository
from ...infrastructure.storage import ObjectStorage
from ...models import Album, AlbumCreate
from .storage_policy import best_effort_delete

logger = logging.getLogger(__name__)


class AlbumService:
    """Service for managing albums.

    Responsibilities:
    - Create albums with server-assigned timestamps
    - Look up single albums and a user's albums
    - Delete an album together with its photos
    """

    def __init__(self, album_repository: AlbumRepository, storage: ObjectStorage):
        self.album_repo = album_repository
        self.storage = storage

    async def create_album(self, fields: AlbumCreate) -> str:
        """Create a new album.

        Returns:
            New album id

        Raises:
            WriteError: If the store rejects the write
        """
        try:
            album_id = await self.album_repo.create(fields)
        except Exception as e:
            raise wrap("create album", e, WriteError) from e

        logger.info("Created album %s for user %s", album_id, fields.user_id)
        return album_id

    async def get_album(self, album_id: str) -> Album:
        """Get album by id.

        Raises:
            NotFoundError: If the album doesn't exist
        """
        try:
            album = await self.album_repo.get_by_id(album_id)
        except Exception as e:
            raise wrap("get album", e) from e

        if album is None:
            raise NotFoundError("Failed to get album: Album not found")
        return album

    async def get_user_albums(self, user_id: str) -> list[Album]:
        """Albums owned by ``user_id``, newest first."""
        try:
            return await self.album_repo.get_by_user(user_id)
        except Exception as e:
            raise wrap("get user albums", e) from e

    async def delete_album(self, album_id: str) -> None:
        """Delete an album and its photo documents in one batch.

        Storage objects of the deleted photos are removed afterwards on a
        best-effort basis.
        """
        try:
            photos = await self.album_repo.delete_with_photos(album_id)
        except Exception as e:
            raise wrap("delete album", e, WriteError) from e

        await asyncio.gather(*(
            best_effort_delete(self.storage, photo.image_url) for photo in photos
        ))
        logger.info("Deleted album %s with %d photos", album_id, len(photos))
