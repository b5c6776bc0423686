"""Document store abstraction.

Supports backends: in-memory and SQLite (aiosqlite).
"""
from .base import (
    ASCENDING,
    DESCENDING,
    SERVER_TIMESTAMP,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    DocumentStoreError,
    Query,
    TransactionConflictError,
    WriteBatch,
)
from .memory_store import MemoryDocumentStore
from .sqlite_store import SqliteDocumentStore
from .factory import get_document_store

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "SERVER_TIMESTAMP",
    "DocumentNotFoundError",
    "DocumentSnapshot",
    "DocumentStore",
    "DocumentStoreError",
    "Query",
    "TransactionConflictError",
    "WriteBatch",
    "MemoryDocumentStore",
    "SqliteDocumentStore",
    "get_document_store",
]
