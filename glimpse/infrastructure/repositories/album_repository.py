"""Album repository - album documents and their cascading delete."""
from typing import Optional

from ...config import ALBUMS_COLLECTION, PHOTOS_COLLECTION
from ...models import Album, AlbumCreate, Photo
from ..documents import DESCENDING, SERVER_TIMESTAMP
from .base import Repository


class AlbumRepository(Repository):
    """Repository for albums."""

    collection = ALBUMS_COLLECTION

    async def create(self, album: AlbumCreate) -> str:
        """Create a new album.

        Returns:
            New album id
        """
        data = album.to_document()
        data["createdAt"] = SERVER_TIMESTAMP
        data["updatedAt"] = SERVER_TIMESTAMP
        return await self.store.add(self.collection, data)

    async def get_by_id(self, album_id: str) -> Optional[Album]:
        snapshot = await self._get(album_id)
        return Album.from_snapshot(snapshot) if snapshot.exists else None

    async def get_by_user(self, user_id: str) -> list[Album]:
        """Albums owned by a user, newest first."""
        snapshots = await (
            self._query()
            .where("userId", "==", user_id)
            .order_by("createdAt", DESCENDING)
            .get()
        )
        return [Album.from_snapshot(s) for s in snapshots]

    async def delete_with_photos(self, album_id: str) -> list[Photo]:
        """Delete an album and all its photo documents in one batch.

        Returns:
            The photo documents that were deleted
        """
        snapshots = await (
            self.store.query(PHOTOS_COLLECTION)
            .where("albumId", "==", album_id)
            .get()
        )

        batch = self.store.batch()
        batch.delete(self.collection, album_id)
        for snapshot in snapshots:
            batch.delete(PHOTOS_COLLECTION, snapshot.id)
        await batch.commit()

        return [Photo.from_snapshot(s) for s in snapshots]
