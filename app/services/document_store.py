from __future__ import annotations

import copy
import logging
import threading
import uuid
from typing import Any, Callable, Iterable, Mapping, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.common import utcnow
from app.models.stored_document import StoredDocument
from app.services.collection_errors import DuplicateRecordError
from app.services.record_paths import serialize_value, set_path

_LOG = logging.getLogger("app.collection.store")

CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"


class DocumentStore(Protocol):
    def fetch_all(self, resource: str) -> list[dict[str, Any]]: ...

    def create_one(self, resource: str, data: dict[str, Any]) -> dict[str, Any]: ...

    def update_one(self, resource: str, record_id: Any, patch: dict[str, Any]) -> dict[str, Any] | None: ...

    def delete_one(self, resource: str, record_id: Any) -> bool: ...


def new_record_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def _now_iso() -> str:
    return utcnow().isoformat()


def _prepare_new_record(data: Mapping[str, Any], id_field: str) -> dict[str, Any]:
    record = serialize_value(copy.deepcopy(dict(data)))
    if not record.get(id_field):
        record[id_field] = new_record_id()
    record[id_field] = str(record[id_field])
    stamp = _now_iso()
    record.setdefault(CREATED_AT_FIELD, stamp)
    record.setdefault(UPDATED_AT_FIELD, stamp)
    return record


def apply_patch(record: Mapping[str, Any], patch: Mapping[str, Any], id_field: str = "id") -> dict[str, Any]:
    merged = copy.deepcopy(dict(record))
    for key, value in serialize_value(dict(patch)).items():
        if key in {id_field, CREATED_AT_FIELD}:
            continue
        set_path(merged, key, value)
    merged[UPDATED_AT_FIELD] = _now_iso()
    return merged


class MemoryDocumentStore:
    def __init__(self, seed: Mapping[str, Iterable[Mapping[str, Any]]] | None = None, *, id_field: str = "id"):
        self._id_field = id_field
        self._lock = threading.Lock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        for resource, records in (seed or {}).items():
            for record in records:
                self.create_one(resource, dict(record))

    def fetch_all(self, resource: str) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._collections.get(resource, {}).values()]

    def create_one(self, resource: str, data: dict[str, Any]) -> dict[str, Any]:
        record = _prepare_new_record(data, self._id_field)
        record_id = record[self._id_field]
        with self._lock:
            collection = self._collections.setdefault(resource, {})
            if record_id in collection:
                raise DuplicateRecordError(record_id)
            collection[record_id] = record
        return copy.deepcopy(record)

    def update_one(self, resource: str, record_id: Any, patch: dict[str, Any]) -> dict[str, Any] | None:
        key = str(record_id)
        with self._lock:
            collection = self._collections.get(resource, {})
            current = collection.get(key)
            if current is None:
                return None
            merged = apply_patch(current, patch, self._id_field)
            collection[key] = merged
            return copy.deepcopy(merged)

    def delete_one(self, resource: str, record_id: Any) -> bool:
        with self._lock:
            return self._collections.get(resource, {}).pop(str(record_id), None) is not None


class SqlDocumentStore:
    def __init__(self, session_factory: Callable[[], Session], *, id_field: str = "id"):
        self._session_factory = session_factory
        self._id_field = id_field
        # SQLite connections may be shared across threadpool workers.
        self._lock = threading.Lock()

    def _to_record(self, row: StoredDocument) -> dict[str, Any]:
        record = copy.deepcopy(dict(row.data or {}))
        record[self._id_field] = row.id
        return record

    def _row_or_none(self, db: Session, resource: str, record_id: Any) -> StoredDocument | None:
        row = db.get(StoredDocument, str(record_id))
        if row is None or row.collection != resource:
            return None
        return row

    def fetch_all(self, resource: str) -> list[dict[str, Any]]:
        with self._lock, self._session_factory() as db:
            rows = (
                db.query(StoredDocument)
                .filter(StoredDocument.collection == resource)
                .order_by(StoredDocument.created_at.asc(), StoredDocument.id.asc())
                .all()
            )
            return [self._to_record(row) for row in rows]

    def create_one(self, resource: str, data: dict[str, Any]) -> dict[str, Any]:
        record = _prepare_new_record(data, self._id_field)
        with self._lock, self._session_factory() as db:
            row = StoredDocument(id=record[self._id_field], collection=resource, data=record)
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise DuplicateRecordError(record[self._id_field]) from exc
            db.refresh(row)
            return self._to_record(row)

    def update_one(self, resource: str, record_id: Any, patch: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock, self._session_factory() as db:
            row = self._row_or_none(db, resource, record_id)
            if row is None:
                return None
            row.data = apply_patch(row.data or {}, patch, self._id_field)
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._to_record(row)

    def delete_one(self, resource: str, record_id: Any) -> bool:
        with self._lock, self._session_factory() as db:
            row = self._row_or_none(db, resource, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True


def build_document_store() -> DocumentStore:
    if settings.uses_sql_storage:
        from app.db.session import SessionLocal

        _LOG.info("using SQL document store")
        return SqlDocumentStore(SessionLocal)
    _LOG.info("using in-memory document store")
    return MemoryDocumentStore()
