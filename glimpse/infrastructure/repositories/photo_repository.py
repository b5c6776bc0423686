"""Photo repository - photo documents and like toggling."""
from typing import Optional

from ...config import PHOTOS_COLLECTION
from ...models import Photo, PhotoCreate
from ..documents import (
    ASCENDING,
    DESCENDING,
    SERVER_TIMESTAMP,
    DocumentNotFoundError,
    DocumentSnapshot,
)
from .base import Repository


class PhotoRepository(Repository):
    """Repository for photos."""

    collection = PHOTOS_COLLECTION

    async def create(self, photo: PhotoCreate) -> str:
        """Create a photo with an empty like set.

        Returns:
            New photo id
        """
        data = photo.to_document()
        data["likes"] = []
        data["likeCount"] = 0
        data["createdAt"] = SERVER_TIMESTAMP
        return await self.store.add(self.collection, data)

    async def get_by_id(self, photo_id: str) -> Optional[Photo]:
        snapshot = await self._get(photo_id)
        return Photo.from_snapshot(snapshot) if snapshot.exists else None

    async def get_by_album(self, album_id: str) -> list[Photo]:
        """Photos of an album, oldest first."""
        snapshots = await (
            self._query()
            .where("albumId", "==", album_id)
            .order_by("createdAt", ASCENDING)
            .get()
        )
        return [Photo.from_snapshot(s) for s in snapshots]

    async def get_recent(self, limit: int) -> list[Photo]:
        """Newest photos across all users."""
        snapshots = await (
            self._query()
            .order_by("createdAt", DESCENDING)
            .limit(limit)
            .get()
        )
        return [Photo.from_snapshot(s) for s in snapshots]

    async def delete(self, photo_id: str) -> None:
        await self.store.delete(self.collection, photo_id)

    async def toggle_like(self, photo_id: str, user_id: str) -> bool:
        """Add or remove ``user_id`` from the like set in one transaction.

        Returns:
            True if the user now likes the photo

        Raises:
            DocumentNotFoundError: If the photo doesn't exist
        """
        def toggle(snapshot: DocumentSnapshot):
            if not snapshot.exists:
                raise DocumentNotFoundError(f"Photo not found: {photo_id}")

            likes = list(snapshot.get("likes") or [])
            if user_id in likes:
                likes.remove(user_id)
                liked = False
            else:
                likes.append(user_id)
                liked = True
            return {"likes": likes, "likeCount": len(likes)}, liked

        return await self.store.transactional_update(self.collection, photo_id, toggle)
