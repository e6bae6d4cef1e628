"""
Document store backed by SQLAlchemy (PostgreSQL in production, SQLite in tests).

Counters are incremented with one INSERT ... ON CONFLICT DO UPDATE ... RETURNING
statement so two writers can never read the same value. The counter document
is read in the same transaction and acts as a lower bound.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import case, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rest_api.models.document import CounterRecord, DocumentRecord
from rest_api.repositories.base import (
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    counter_key,
    split_path,
)
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import BackendUnavailableError

logger = get_logger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def _at_least(column, floor: int):
    # Portable GREATEST(column, floor)
    return case((column >= floor, column), else_=floor)


class SqlDocumentStore(DocumentStore):
    """Documents as JSON rows, one row per path."""

    def __init__(self, session_factory: sessionmaker[Session]):
        super().__init__()
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            safe_commit(session)
        except SQLAlchemyError as e:
            session.rollback()
            raise BackendUnavailableError(
                "document store", operation=operation, error=str(e)
            ) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _find(session: Session, path: str) -> DocumentRecord | None:
        return session.scalar(select(DocumentRecord).where(DocumentRecord.path == path))

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def get_document(self, path: str) -> dict[str, Any] | None:
        with self._session("get_document") as session:
            record = self._find(session, path.strip("/"))
            if record is None:
                return None
            return copy.deepcopy(record.data)

    def _write_document(self, path: str, data: dict[str, Any]) -> None:
        path = path.strip("/")
        collection, doc_id = split_path(path)
        with self._session("set_document") as session:
            record = self._find(session, path)
            if record is None:
                session.add(
                    DocumentRecord(
                        path=path,
                        collection=collection,
                        doc_id=doc_id,
                        data=copy.deepcopy(data),
                    )
                )
            else:
                record.data = copy.deepcopy(data)

    def _merge_fields(self, path: str, partial: dict[str, Any]) -> None:
        path = path.strip("/")
        with self._session("update_fields") as session:
            record = self._find(session, path)
            if record is None:
                raise DocumentNotFoundError(path)
            # JSON columns track reassignment, not in-place mutation
            record.data = {**record.data, **copy.deepcopy(partial)}

    def _remove_document(self, path: str) -> bool:
        path = path.strip("/")
        with self._session("delete_document") as session:
            record = self._find(session, path)
            if record is None:
                return False
            session.delete(record)
            return True

    def _insert_new(self, collection_path: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        with self._session("create_document") as session:
            session.add(
                DocumentRecord(
                    path=f"{collection_path}/{doc_id}",
                    collection=collection_path,
                    doc_id=doc_id,
                    data=copy.deepcopy(data),
                )
            )
        return doc_id

    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        collection_path = collection_path.strip("/")
        with self._session("list_collection") as session:
            records = session.scalars(
                select(DocumentRecord)
                .where(DocumentRecord.collection == collection_path)
                .order_by(DocumentRecord.seq)
            ).all()
            return [
                DocumentSnapshot(id=r.doc_id, path=r.path, data=copy.deepcopy(r.data))
                for r in records
            ]

    def _atomic_increment(self, path: str, field: str) -> int:
        return self._bump_counter(path, field, floor=0, step=1, operation="increment_counter")

    def _raise_counter(self, path: str, field: str, value: int) -> int:
        return self._bump_counter(path, field, floor=value, step=0, operation="advance_counter")

    def _bump_counter(self, path: str, field: str, floor: int, step: int, operation: str) -> int:
        """
        Set the counter to max(counter row, counter document, floor) + step.

        The document value takes part so numbers written there by another
        sequencer (or by set_document) are never issued again.
        """
        path = path.strip("/")
        key = counter_key(path, field)
        with self._session(operation) as session:
            floor = max(floor, self._document_value(session, path, field))
            insert_fn = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
            if insert_fn is not None:
                stmt = (
                    insert_fn(CounterRecord)
                    .values(key=key, value=floor + step)
                    .on_conflict_do_update(
                        index_elements=[CounterRecord.key],
                        set_={"value": _at_least(CounterRecord.value, floor) + step},
                    )
                    .returning(CounterRecord.value)
                )
                value = session.execute(stmt).scalar_one()
            else:
                value = self._bump_with_row_lock(session, key, floor, step)

            self._mirror_counter(session, path, field, value)
            return value

    def _document_value(self, session: Session, path: str, field: str) -> int:
        record = session.scalar(
            select(DocumentRecord).where(DocumentRecord.path == path).with_for_update()
        )
        if record is None:
            return 0
        return int(record.data.get(field) or 0)

    @staticmethod
    def _bump_with_row_lock(session: Session, key: str, floor: int, step: int) -> int:
        counter = session.scalar(
            select(CounterRecord).where(CounterRecord.key == key).with_for_update()
        )
        if counter is None:
            counter = CounterRecord(key=key, value=floor + step)
            session.add(counter)
        else:
            counter.value = max(counter.value, floor) + step
        session.flush()
        return counter.value

    def _mirror_counter(self, session: Session, path: str, field: str, value: int) -> None:
        """Keep the counter document readable as {field: value}."""
        record = self._find(session, path)
        if record is None:
            collection, doc_id = split_path(path)
            session.add(
                DocumentRecord(
                    path=path, collection=collection, doc_id=doc_id, data={field: value}
                )
            )
        else:
            record.data = {**record.data, field: value}

    def ping(self) -> bool:
        with self._session("ping") as session:
            session.execute(text("SELECT 1"))
        return True
