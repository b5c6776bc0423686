"""SQLite document store.

Documents are stored as JSON text in a single ``documents`` table and
queried with SQLite's JSON functions through aiosqlite.
"""
import asyncio
import json
import random
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import aiosqlite

from ...config import TRANSACTION_MAX_ATTEMPTS
from .base import (
    DESCENDING,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    DocumentStoreError,
    MutateFn,
    Query,
    TransactionConflictError,
    WriteOperation,
    run_mutation,
)

RETRY_BASE_DELAY = 0.01

SCHEMA = """
    CREATE TABLE IF NOT EXISTS documents (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        data TEXT NOT NULL,
        version INTEGER NOT NULL DEFAULT 1,
        UNIQUE(collection, id)
    )
"""


def _encode_default(value: Any) -> str:
    """JSON fallback: datetimes become sortable ISO 8601 strings."""
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dumps(data: dict) -> str:
    return json.dumps(data, default=_encode_default)


def _path(field_name: str) -> str:
    return f"$.{field_name}"


def _query_value(value: Any) -> Any:
    """Convert a filter value to what ``json_extract`` returns for it."""
    if isinstance(value, datetime):
        return _encode_default(value)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (dict, list, tuple)):
        raise ValueError("Equality filters on maps or arrays are not supported")
    return value


class SqliteDocumentStore(DocumentStore):
    """Document store persisted in one SQLite file.

    All statements go through a single aiosqlite connection guarded by an
    asyncio lock, so in-process writers are serialized. The ``version``
    column still guards transactions against other processes sharing the
    file: a transaction commits with ``UPDATE ... WHERE version = ?`` and
    retries when the row moved underneath it.
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        max_attempts: int = TRANSACTION_MAX_ATTEMPTS
    ):
        super().__init__()
        self.db_path = db_path
        self.max_attempts = max_attempts
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        """Connect and create the schema if needed."""
        if self._conn is not None:
            return
        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute(SCHEMA)
        await self._conn.commit()

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DocumentStoreError("Document store is not open")
        return self._conn

    # =========================================================================
    # Row helpers (caller holds the lock)
    # =========================================================================

    async def _fetch(self, collection: str, doc_id: str) -> DocumentSnapshot:
        async with self.conn.execute(
            "SELECT data, version FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return DocumentSnapshot(collection, doc_id)
        return DocumentSnapshot(collection, doc_id, json.loads(row["data"]), row["version"])

    async def _upsert(self, collection: str, doc_id: str, data: dict) -> None:
        await self.conn.execute(
            """INSERT INTO documents (collection, id, data, version)
               VALUES (?, ?, ?, 1)
               ON CONFLICT(collection, id)
               DO UPDATE SET data = excluded.data, version = version + 1""",
            (collection, doc_id, _dumps(self._resolve(data)))
        )

    async def _merge(self, collection: str, doc_id: str, updates: dict) -> None:
        snapshot = await self._fetch(collection, doc_id)
        if not snapshot.exists:
            raise DocumentNotFoundError(f"No document to update: {collection}/{doc_id}")
        merged = snapshot.to_dict()
        merged.update(self._resolve(updates))
        await self.conn.execute(
            """UPDATE documents SET data = ?, version = version + 1
               WHERE collection = ? AND id = ?""",
            (_dumps(merged), collection, doc_id)
        )

    async def _remove(self, collection: str, doc_id: str) -> None:
        await self.conn.execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id)
        )

    # =========================================================================
    # DocumentStore
    # =========================================================================

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        async with self._lock:
            return await self._fetch(collection, doc_id)

    async def add(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        await self.set(collection, doc_id, data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: dict) -> None:
        async with self._lock:
            await self._upsert(collection, doc_id, data)
            await self.conn.commit()

    async def update(self, collection: str, doc_id: str, data: dict) -> None:
        async with self._lock:
            await self._merge(collection, doc_id, data)
            await self.conn.commit()

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock:
            await self._remove(collection, doc_id)
            await self.conn.commit()

    async def transactional_update(
        self,
        collection: str,
        doc_id: str,
        mutate_fn: MutateFn
    ) -> Any:
        for attempt in range(1, self.max_attempts + 1):
            async with self._lock:
                snapshot = await self._fetch(collection, doc_id)
                updates, result = await run_mutation(mutate_fn, snapshot)
                if updates is None:
                    return result

                if snapshot.exists:
                    merged = snapshot.to_dict()
                    merged.update(self._resolve(updates))
                    cursor = await self.conn.execute(
                        """UPDATE documents SET data = ?, version = version + 1
                           WHERE collection = ? AND id = ? AND version = ?""",
                        (_dumps(merged), collection, doc_id, snapshot.version)
                    )
                else:
                    cursor = await self.conn.execute(
                        """INSERT OR IGNORE INTO documents (collection, id, data, version)
                           VALUES (?, ?, ?, 1)""",
                        (collection, doc_id, _dumps(self._resolve(updates)))
                    )

                if cursor.rowcount == 1:
                    await self.conn.commit()
                    return result
                await self.conn.rollback()

            await asyncio.sleep(random.uniform(0, RETRY_BASE_DELAY * 2 ** attempt))

        raise TransactionConflictError(
            f"Transaction on {collection}/{doc_id} aborted after {self.max_attempts} attempts"
        )

    async def _run_query(self, query: Query) -> list[DocumentSnapshot]:
        sql = "SELECT id, data, version FROM documents WHERE collection = ?"
        params: list[Any] = [query.collection]

        for name, value in query.filters:
            if value is None:
                sql += " AND json_type(data, ?) = 'null'"
                params.append(_path(name))
            else:
                sql += " AND json_extract(data, ?) = ?"
                params.extend([_path(name), _query_value(value)])

        for name, _ in query.orders:
            sql += " AND json_type(data, ?) IS NOT NULL"
            params.append(_path(name))

        order_terms = []
        for name, direction in query.orders:
            order_terms.append(f"json_extract(data, ?) {'DESC' if direction == DESCENDING else 'ASC'}")
            params.append(_path(name))
        tie_descending = bool(query.orders) and query.orders[-1][1] == DESCENDING
        order_terms.append(f"seq {'DESC' if tie_descending else 'ASC'}")
        sql += " ORDER BY " + ", ".join(order_terms)

        if query.limit_count is not None:
            sql += " LIMIT ?"
            params.append(query.limit_count)

        async with self._lock:
            async with self.conn.execute(sql, tuple(params)) as cursor:
                rows = await cursor.fetchall()

        return [
            DocumentSnapshot(query.collection, row["id"], json.loads(row["data"]), row["version"])
            for row in rows
        ]

    async def _commit_batch(self, operations: list[WriteOperation]) -> None:
        async with self._lock:
            try:
                for op in operations:
                    if op.kind == "delete":
                        await self._remove(op.collection, op.doc_id)
                    elif op.kind == "set":
                        await self._upsert(op.collection, op.doc_id, op.data)
                    else:
                        await self._merge(op.collection, op.doc_id, op.data)
                await self.conn.commit()
            except Exception:
                await self.conn.rollback()
                raise
