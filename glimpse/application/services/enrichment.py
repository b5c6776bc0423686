"""Loaders that attach related documents to listed rows.

Each loader takes the related ids of a page of rows and returns the
related documents in the same order, None where a document is missing.
Lookups are one per row, without deduplication.
"""
import asyncio
from typing import Generic, Optional, TypeVar

from ...infrastructure.repositories import AlbumRepository, UserRepository
from ...models import Album, User

T = TypeVar("T")


class DocumentLoader(Generic[T]):
    """Batch-capable lookup of related documents by id."""

    async def load(self, doc_id: str) -> Optional[T]:
        raise NotImplementedError

    async def load_many(self, doc_ids: list[str]) -> list[Optional[T]]:
        return list(await asyncio.gather(*(self.load(doc_id) for doc_id in doc_ids)))


class ProfileLoader(DocumentLoader[User]):
    def __init__(self, user_repository: UserRepository):
        self.user_repo = user_repository

    async def load(self, user_id: str) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)


class AlbumLoader(DocumentLoader[Album]):
    def __init__(self, album_repository: AlbumRepository):
        self.album_repo = album_repository

    async def load(self, album_id: str) -> Optional[Album]:
        return await self.album_repo.get_by_id(album_id)
