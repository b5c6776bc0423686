"""Abstract document store interface.

A document store holds named collections, each a mapping from document id
to a mapping of fields. It supports equality-filtered, ordered, limited
queries, batched multi-document writes and a single-document
transactional read-modify-write primitive.
"""
import copy
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, Union


class DocumentStoreError(Exception):
    """Base exception for document store operations."""
    pass


class DocumentNotFoundError(DocumentStoreError):
    """Document does not exist."""
    pass


class TransactionConflictError(DocumentStoreError):
    """Transaction kept conflicting with concurrent writers."""
    pass


class _ServerTimestamp:
    """Sentinel replaced by the store's clock at write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

ASCENDING = "asc"
DESCENDING = "desc"


class ServerClock:
    """Strictly increasing UTC clock used to resolve ``SERVER_TIMESTAMP``."""

    def __init__(self):
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time view of a single document."""
    collection: str
    id: str
    data: Optional[dict] = None
    version: int = 0

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> Optional[dict]:
        """Return a copy of the document fields, or None if missing."""
        return copy.deepcopy(self.data) if self.data is not None else None

    def get(self, field_name: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        return self.data.get(field_name, default)


# mutate_fn(snapshot) -> (updates or None, result)
MutateResult = tuple[Optional[dict], Any]
MutateFn = Callable[[DocumentSnapshot], Union[MutateResult, Awaitable[MutateResult]]]


@dataclass
class Query:
    """Immutable query builder bound to a store."""
    store: "DocumentStore"
    collection: str
    filters: tuple = ()
    orders: tuple = ()
    limit_count: Optional[int] = None

    def where(self, field_name: str, op: str, value: Any) -> "Query":
        """Add an equality filter (only ``==`` is supported)."""
        if op != "==":
            raise ValueError(f"Unsupported query operator: {op}")
        return Query(
            self.store, self.collection,
            self.filters + ((field_name, value),), self.orders, self.limit_count
        )

    def order_by(self, field_name: str, direction: str = ASCENDING) -> "Query":
        """Order results by a field. Documents lacking the field are excluded."""
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unsupported order direction: {direction}")
        return Query(
            self.store, self.collection,
            self.filters, self.orders + ((field_name, direction),), self.limit_count
        )

    def limit(self, count: int) -> "Query":
        if count < 0:
            raise ValueError("Query limit must not be negative")
        return Query(self.store, self.collection, self.filters, self.orders, count)

    async def get(self) -> list[DocumentSnapshot]:
        """Execute the query."""
        return await self.store._run_query(self)


@dataclass
class WriteOperation:
    kind: str  # 'set', 'update', 'delete'
    collection: str
    doc_id: str
    data: Optional[dict] = None


@dataclass
class WriteBatch:
    """Multi-document write applied atomically on ``commit``."""
    store: "DocumentStore"
    operations: list = field(default_factory=list)

    def set(self, collection: str, doc_id: str, data: dict) -> "WriteBatch":
        self.operations.append(WriteOperation("set", collection, doc_id, dict(data)))
        return self

    def update(self, collection: str, doc_id: str, data: dict) -> "WriteBatch":
        self.operations.append(WriteOperation("update", collection, doc_id, dict(data)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self.operations.append(WriteOperation("delete", collection, doc_id))
        return self

    async def commit(self) -> None:
        """Apply all operations, or none of them."""
        await self.store._commit_batch(list(self.operations))
        self.operations.clear()


class DocumentStore(ABC):
    """Abstract interface for document storage.

    Implementations:
    - MemoryDocumentStore: in-process dictionaries (tests, demos)
    - SqliteDocumentStore: JSON documents in a SQLite file via aiosqlite
    """

    def __init__(self):
        self.clock = ServerClock()

    async def open(self) -> None:
        """Acquire resources. Default: nothing to do."""
        pass

    async def close(self) -> None:
        """Release resources. Default: nothing to do."""
        pass

    def query(self, collection: str) -> Query:
        """Start a query on ``collection``."""
        return Query(self, collection)

    def batch(self) -> WriteBatch:
        """Start a batched write."""
        return WriteBatch(self)

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Read one document. Missing documents yield a non-existent snapshot."""
        pass

    @abstractmethod
    async def add(self, collection: str, data: dict) -> str:
        """Create a document with a generated id.

        Returns:
            The new document id
        """
        pass

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: dict) -> None:
        """Create or overwrite a document."""
        pass

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        """Merge fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document doesn't exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        pass

    @abstractmethod
    async def transactional_update(
        self,
        collection: str,
        doc_id: str,
        mutate_fn: MutateFn
    ) -> Any:
        """Optimistic read-modify-write of a single document.

        ``mutate_fn`` receives the current snapshot and returns
        ``(updates, result)``. ``updates`` are merged into the document
        only if nobody wrote it in between; otherwise ``mutate_fn`` is
        re-run against a fresh snapshot. ``updates=None`` writes nothing.
        An exception from ``mutate_fn`` aborts the transaction.

        Returns:
            ``result`` from the successful attempt

        Raises:
            TransactionConflictError: If every attempt conflicted
        """
        pass

    @abstractmethod
    async def _run_query(self, query: Query) -> list[DocumentSnapshot]:
        pass

    @abstractmethod
    async def _commit_batch(self, operations: list[WriteOperation]) -> None:
        pass

    def _resolve(self, data: dict) -> dict:
        """Copy ``data`` replacing ``SERVER_TIMESTAMP`` with the store clock."""
        resolved = {}
        for key, value in data.items():
            if value is SERVER_TIMESTAMP:
                resolved[key] = self.clock.now()
            elif isinstance(value, dict):
                resolved[key] = self._resolve(value)
            else:
                resolved[key] = copy.deepcopy(value)
        return resolved


async def run_mutation(mutate_fn: MutateFn, snapshot: DocumentSnapshot) -> MutateResult:
    """Call ``mutate_fn`` whether it is a plain function or a coroutine function."""
    outcome = mutate_fn(snapshot)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome
