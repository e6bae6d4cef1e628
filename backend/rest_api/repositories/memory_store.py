"""
In-process document store for tests and local runs.
"""

from __future__ import annotations

import copy
import threading
from typing import Any

from rest_api.repositories.base import (
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    split_path,
)
from rest_api.repositories.sql_store import new_document_id


class MemoryDocumentStore(DocumentStore):
    """Documents kept in a dict keyed by path, guarded by one re-entrant lock."""

    def __init__(self) -> None:
        super().__init__()
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    def get_document(self, path: str) -> dict[str, Any] | None:
        with self._lock:
            data = self._documents.get(path.strip("/"))
            return copy.deepcopy(data) if data is not None else None

    def _write_document(self, path: str, data: dict[str, Any]) -> None:
        path = path.strip("/")
        split_path(path)
        with self._lock:
            self._documents[path] = copy.deepcopy(data)

    def _merge_fields(self, path: str, partial: dict[str, Any]) -> None:
        path = path.strip("/")
        with self._lock:
            if path not in self._documents:
                raise DocumentNotFoundError(path)
            self._documents[path].update(copy.deepcopy(partial))

    def _remove_document(self, path: str) -> bool:
        with self._lock:
            return self._documents.pop(path.strip("/"), None) is not None

    def _insert_new(self, collection_path: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        with self._lock:
            self._documents[f"{collection_path}/{doc_id}"] = copy.deepcopy(data)
        return doc_id

    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        prefix = collection_path.strip("/") + "/"
        with self._lock:
            # dicts keep insertion order
            return [
                DocumentSnapshot(id=path[len(prefix):], path=path, data=copy.deepcopy(data))
                for path, data in self._documents.items()
                if path.startswith(prefix) and "/" not in path[len(prefix):]
            ]

    def _atomic_increment(self, path: str, field: str) -> int:
        path = path.strip("/")
        with self._lock:
            document = self._documents.setdefault(path, {})
            value = int(document.get(field, 0)) + 1
            document[field] = value
            return value

    def _raise_counter(self, path: str, field: str, value: int) -> int:
        path = path.strip("/")
        with self._lock:
            document = self._documents.setdefault(path, {})
            document[field] = max(int(document.get(field) or 0), value)
            return document[field]

    def ping(self) -> bool:
        return True
