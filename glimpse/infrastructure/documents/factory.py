"""Factory for creating document store backends."""
from pathlib import Path
from typing import Optional

from ...config import DATABASE_PATH, DOCUMENT_BACKEND
from .base import DocumentStore
from .memory_store import MemoryDocumentStore


def get_document_store(
    backend: Optional[str] = None,
    db_path: Optional[Path] = None
) -> DocumentStore:
    """Create a document store.

    Args:
        backend: 'memory' or 'sqlite' (default: GLIMPSE_DOCUMENT_BACKEND)
        db_path: SQLite file (default: GLIMPSE_DATABASE_PATH)

    Returns:
        Unopened document store; call ``await store.open()`` before use
    """
    backend = (backend or DOCUMENT_BACKEND).lower()

    if backend == "memory":
        return MemoryDocumentStore()

    elif backend == "sqlite":
        from .sqlite_store import SqliteDocumentStore
        return SqliteDocumentStore(db_path or DATABASE_PATH)

    else:
        raise ValueError(f"Unknown document backend: {backend}")
