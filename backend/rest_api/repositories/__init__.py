"""
Document store package.

Usage:
    from rest_api.repositories import DocumentStore, get_document_store

    @router.get("/menu")
    def list_menu(store: DocumentStore = Depends(get_document_store)):
        ...

One store instance serves the process so every write reaches the
subscriptions opened by the realtime routes.
"""

from functools import lru_cache

from shared.infrastructure.db import get_session_factory

from .base import (
    DocumentStore,
    DocumentSnapshot,
    DocumentNotFoundError,
    SnapshotListener,
    Unsubscribe,
    split_path,
)
from .sql_store import SqlDocumentStore
from .memory_store import MemoryDocumentStore


@lru_cache
def get_document_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide SQL document store."""
    return SqlDocumentStore(get_session_factory())


__all__ = [
    "DocumentStore",
    "DocumentSnapshot",
    "DocumentNotFoundError",
    "SnapshotListener",
    "Unsubscribe",
    "split_path",
    "SqlDocumentStore",
    "MemoryDocumentStore",
    "get_document_store",
]
