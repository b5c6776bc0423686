"""Comment repository."""
from typing import Optional

from ...config import COMMENTS_COLLECTION
from ...models import Comment
from ..documents import ASCENDING, SERVER_TIMESTAMP
from .base import Repository


class CommentRepository(Repository):
    """Repository for photo comments."""

    collection = COMMENTS_COLLECTION

    async def create(self, photo_id: str, user_id: str, text: str) -> str:
        return await self.store.add(self.collection, {
            "photoId": photo_id,
            "userId": user_id,
            "text": text,
            "createdAt": SERVER_TIMESTAMP,
        })

    async def get_by_id(self, comment_id: str) -> Optional[Comment]:
        snapshot = await self._get(comment_id)
        return Comment.from_snapshot(snapshot) if snapshot.exists else None

    async def get_by_photo(self, photo_id: str) -> list[Comment]:
        """Comments on a photo, oldest first."""
        snapshots = await (
            self._query()
            .where("photoId", "==", photo_id)
            .order_by("createdAt", ASCENDING)
            .get()
        )
        return [Comment.from_snapshot(s) for s in snapshots]

    async def delete(self, comment_id: str) -> None:
        await self.store.delete(self.collection, comment_id)
