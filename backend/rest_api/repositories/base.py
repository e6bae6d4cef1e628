"""
Document store contract.

Documents are JSON objects addressed by slash separated paths
("restaurants/{rid}/orders/{oid}"); a collection path is a document path
without its last segment. Implementations share the subscription hub below
so every write made through a store reaches that store's listeners.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class DocumentNotFoundError(Exception):
    """Partial update addressed a document that does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document not found: {path}")


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document id, its full path and a copy of its data."""

    id: str
    path: str
    data: dict[str, Any]


SnapshotListener = Callable[[list[DocumentSnapshot]], None]
Unsubscribe = Callable[[], None]


def split_path(path: str) -> tuple[str, str]:
    """Split a document path into (collection path, document id)."""
    collection, _, doc_id = path.strip("/").rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document path: {path!r}")
    return collection, doc_id


def counter_key(path: str, field: str) -> str:
    return f"{path}#{field}"


class DocumentStore(ABC):
    """
    Abstract document store.

    Subclasses implement the storage primitives; subscriptions are handled
    here. Storage failures surface as BackendUnavailableError.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[SnapshotListener]] = {}
        self._listeners_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Storage primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_document(self, path: str) -> dict[str, Any] | None:
        """Return a copy of the document, or None if absent."""
        ...

    @abstractmethod
    def _write_document(self, path: str, data: dict[str, Any]) -> None:
        """Create or fully replace a document."""
        ...

    @abstractmethod
    def _merge_fields(self, path: str, partial: dict[str, Any]) -> None:
        """Merge fields into an existing document or raise DocumentNotFoundError."""
        ...

    @abstractmethod
    def _remove_document(self, path: str) -> bool:
        ...

    @abstractmethod
    def _insert_new(self, collection_path: str, data: dict[str, Any]) -> str:
        """Insert a document under a fresh id and return the id."""
        ...

    @abstractmethod
    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        """All documents of a collection in insertion order."""
        ...

    @abstractmethod
    def _atomic_increment(self, path: str, field: str) -> int:
        ...

    @abstractmethod
    def _raise_counter(self, path: str, field: str, value: int) -> int:
        ...

    @abstractmethod
    def ping(self) -> bool:
        """True when the backend answers."""
        ...

    # -------------------------------------------------------------------------
    # Public write API (notifies listeners)
    # -------------------------------------------------------------------------

    def set_document(self, path: str, data: dict[str, Any]) -> None:
        self._write_document(path, data)
        self._notify(split_path(path)[0])

    def update_fields(self, path: str, partial: dict[str, Any]) -> None:
        """
        Merge top-level fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        self._merge_fields(path, partial)
        self._notify(split_path(path)[0])

    def delete_document(self, path: str) -> bool:
        """Delete a document. Returns False if it was already gone."""
        deleted = self._remove_document(path)
        if deleted:
            self._notify(split_path(path)[0])
        return deleted

    def create_document(self, collection_path: str, data: dict[str, Any]) -> str:
        """Insert a document under a generated id and return the id."""
        doc_id = self._insert_new(collection_path.strip("/"), data)
        self._notify(collection_path.strip("/"))
        return doc_id

    def increment_counter(self, path: str, field: str = "current") -> int:
        """
        Atomically increment a counter field and return the new value.

        The first increment of an absent counter returns 1. Concurrent callers
        always receive distinct values. The counter continues from the value
        in the counter document when that is higher.
        """
        value = self._atomic_increment(path, field)
        self._notify(split_path(path)[0])
        return value

    def advance_counter(self, path: str, field: str, value: int) -> int:
        """
        Raise a counter to at least value and return the resulting value.

        Never lowers a counter, so out of order callers cannot undo a
        number another writer already recorded.
        """
        result = self._raise_counter(path, field, value)
        self._notify(split_path(path)[0])
        return result

    def query_collection(
        self, collection_path: str, field: str, value: Any
    ) -> list[DocumentSnapshot]:
        """Documents of a collection whose top-level field equals value."""
        return [
            snapshot
            for snapshot in self.list_collection(collection_path)
            if snapshot.data.get(field) == value
        ]

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe_to_collection(
        self, collection_path: str, on_snapshot: SnapshotListener
    ) -> Unsubscribe:
        """
        Deliver the full collection now and after every write through this store.

        Returns a callable that stops delivery. If the initial load fails the
        listener is not registered and the error propagates.
        """
        collection_path = collection_path.strip("/")
        with self._listeners_lock:
            self._listeners.setdefault(collection_path, []).append(on_snapshot)

        try:
            initial = self.list_collection(collection_path)
        except Exception:
            self._remove_listener(collection_path, on_snapshot)
            raise
        self._deliver(collection_path, on_snapshot, initial)

        def unsubscribe() -> None:
            self._remove_listener(collection_path, on_snapshot)

        return unsubscribe

    def _remove_listener(self, collection_path: str, listener: SnapshotListener) -> None:
        with self._listeners_lock:
            listeners = self._listeners.get(collection_path, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(collection_path, None)

    def listener_count(self, collection_path: str) -> int:
        with self._listeners_lock:
            return len(self._listeners.get(collection_path.strip("/"), []))

    def _notify(self, collection_path: str) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners.get(collection_path, []))
        if not listeners:
            return

        try:
            snapshots = self.list_collection(collection_path)
        except Exception as e:
            # Listeners keep the last snapshot they received
            logger.error(
                "Failed to load snapshot for listeners",
                collection=collection_path,
                error=str(e),
            )
            return

        for listener in listeners:
            self._deliver(collection_path, listener, snapshots)

    def _deliver(
        self,
        collection_path: str,
        listener: SnapshotListener,
        snapshots: list[DocumentSnapshot],
    ) -> None:
        try:
            listener(snapshots)
        except Exception as e:
            logger.error(
                "Snapshot listener failed",
                collection=collection_path,
                error=str(e),
                exc_info=True,
            )
