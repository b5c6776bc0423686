"""Base repository over a document store collection."""
from ..documents import DocumentSnapshot, DocumentStore, Query


class Repository:
    """Base repository class.

    Each repository owns one collection of the document store.

    Example:
        class AlbumRepository(Repository):
            collection = "albums"

            async def get_by_id(self, album_id: str) -> Album | None:
                snapshot = await self._get(album_id)
                return Album.from_snapshot(snapshot) if snapshot.exists else None
    """

    collection: str = ""

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store.

        Args:
            store: Opened document store
        """
        self.store = store

    async def _get(self, doc_id: str) -> DocumentSnapshot:
        return await self.store.get(self.collection, doc_id)

    def _query(self) -> Query:
        return self.store.query(self.collection)

