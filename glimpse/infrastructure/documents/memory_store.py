"""In-memory document store.

Implements the full DocumentStore contract, including optimistic
transactions with per-document version counters, so code written against
the interface can be exercised without a database.
"""
import asyncio
import copy
import itertools
import uuid
from dataclasses import dataclass
from typing import Any

from ...config import TRANSACTION_MAX_ATTEMPTS
from .base import (
    DESCENDING,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    MutateFn,
    Query,
    TransactionConflictError,
    WriteOperation,
    run_mutation,
)

RETRY_BASE_DELAY = 0.005


@dataclass
class _Record:
    data: dict
    version: int
    seq: int


class MemoryDocumentStore(DocumentStore):
    """Document store backed by dictionaries.

    Layout:
        collections[collection][doc_id] -> _Record(data, version, seq)

    ``seq`` is the insertion order and breaks ties between equal sort keys.
    """

    def __init__(self, max_attempts: int = TRANSACTION_MAX_ATTEMPTS):
        super().__init__()
        self.max_attempts = max_attempts
        self._collections: dict[str, dict[str, _Record]] = {}
        self._seq = itertools.count(1)
        self._lock = asyncio.Lock()

    def _records(self, collection: str) -> dict[str, _Record]:
        return self._collections.setdefault(collection, {})

    def _snapshot(self, collection: str, doc_id: str) -> DocumentSnapshot:
        record = self._records(collection).get(doc_id)
        if record is None:
            return DocumentSnapshot(collection, doc_id)
        return DocumentSnapshot(collection, doc_id, copy.deepcopy(record.data), record.version)

    def _write(self, collection: str, doc_id: str, data: dict) -> None:
        records = self._records(collection)
        existing = records.get(doc_id)
        if existing is None:
            records[doc_id] = _Record(data, 1, next(self._seq))
        else:
            existing.data = data
            existing.version += 1

    def _merge(self, collection: str, doc_id: str, updates: dict) -> None:
        record = self._records(collection).get(doc_id)
        if record is None:
            raise DocumentNotFoundError(f"No document to update: {collection}/{doc_id}")
        merged = dict(record.data)
        merged.update(updates)
        record.data = merged
        record.version += 1

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        async with self._lock:
            return self._snapshot(collection, doc_id)

    async def add(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        async with self._lock:
            self._write(collection, doc_id, self._resolve(data))
        return doc_id

    async def set(self, collection: str, doc_id: str, data: dict) -> None:
        async with self._lock:
            self._write(collection, doc_id, self._resolve(data))

    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        async with self._lock:
            self._merge(collection, doc_id, self._resolve(data))

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock:
            self._records(collection).pop(doc_id, None)

    async def transactional_update(
        self,
        collection: str,
        doc_id: str,
        mutate_fn: MutateFn
    ) -> Any:
        for attempt in range(1, self.max_attempts + 1):
            snapshot = await self.get(collection, doc_id)
            updates, result = await run_mutation(mutate_fn, snapshot)
            if updates is None:
                return result

            async with self._lock:
                record = self._records(collection).get(doc_id)
                current_version = record.version if record else 0
                if current_version == snapshot.version:
                    if record is None:
                        self._write(collection, doc_id, self._resolve(updates))
                    else:
                        self._merge(collection, doc_id, self._resolve(updates))
                    return result

            await asyncio.sleep(RETRY_BASE_DELAY * attempt)

        raise TransactionConflictError(
            f"Transaction on {collection}/{doc_id} aborted after {self.max_attempts} attempts"
        )

    async def _run_query(self, query: Query) -> list[DocumentSnapshot]:
        async with self._lock:
            candidates = []
            for doc_id, record in self._records(query.collection).items():
                if all(record.data.get(name) == value for name, value in query.filters):
                    if all(name in record.data for name, _ in query.orders):
                        candidates.append((doc_id, record))

            # Stable multi-key sort: apply orderings from last to first,
            # insertion order as the final tie-breaker.
            tie_descending = bool(query.orders) and query.orders[-1][1] == DESCENDING
            candidates.sort(key=lambda item: item[1].seq, reverse=tie_descending)
            for name, direction in reversed(query.orders):
                candidates.sort(
                    key=lambda item: item[1].data[name],
                    reverse=direction == DESCENDING
                )

            if query.limit_count is not None:
                candidates = candidates[:query.limit_count]

            return [
                DocumentSnapshot(
                    query.collection, doc_id, copy.deepcopy(record.data), record.version
                )
                for doc_id, record in candidates
            ]

    async def _commit_batch(self, operations: list[WriteOperation]) -> None:
        async with self._lock:
            # Validate before applying anything so the batch is all-or-nothing
            present: dict[tuple, bool] = {}
            for op in operations:
                key = (op.collection, op.doc_id)
                if op.kind == "delete":
                    present[key] = False
                elif op.kind == "set":
                    present[key] = True
                elif op.kind == "update":
                    exists = present.get(key, op.doc_id in self._records(op.collection))
                    if not exists:
                        raise DocumentNotFoundError(
                            f"No document to update: {op.collection}/{op.doc_id}"
                        )

            for op in operations:
                if op.kind == "delete":
                    self._records(op.collection).pop(op.doc_id, None)
                elif op.kind == "set":
                    self._write(op.collection, op.doc_id, self._resolve(op.data))
                else:
                    self._merge(op.collection, op.doc_id, self._resolve(op.data))
