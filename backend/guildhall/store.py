"""Document store adapter.

Collections and subcollections are addressed by slash-separated paths the way
a managed document database addresses them::

    users/<uid>
    channels/<cid>/messages/<mid>
    reactions/<mid>/items/<uid>_<emoji>

Every document is a JSON object stored in the ``documents`` table. The
entity services only ever talk to :class:`DocumentStore`; swap this module to
back the API with a hosted document database instead.

Any database failure surfaces as :class:`StoreUnavailableError`. Nothing is
retried here.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import BadRequestError, NotFoundError, StoreUnavailableError
from guildhall.database import get_db
from guildhall.models.document import Document

logger = logging.getLogger(__name__)

QUERY_OPERATORS = ("==", "array-contains")


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder replaced by the store with the write time
SERVER_TIMESTAMP = _ServerTimestamp()


class ArrayUnion:
    """Update value that appends ``items`` to an array field, skipping items
    already present."""

    def __init__(self, *items: Any) -> None:
        self.items = list(items)


def timestamp_now() -> str:
    """UTC timestamp with a fixed-width fraction so string order is time order."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def join_path(*segments: str) -> str:
    return "/".join(segments)


def check_document_id(value: str, field: str) -> str:
    """Reject caller-supplied ids that would break out of their collection."""
    if not value or "/" in value:
        raise BadRequestError(f"{field} must be a non-empty id without '/'")
    return value


def _split_path(path: str) -> tuple[str, str]:
    collection, _, doc_id = path.rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document path: {path!r}")
    return collection, doc_id


def _resolve(value: Any, now: str) -> Any:
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, dict):
        return {k: _resolve(v, now) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve(v, now) for v in value]
    return value


def _with_id(row: Document) -> dict:
    # A stored "id" wins over the path segment
    return {"id": row.doc_id, **row.data}


class DocumentStore:
    """Per-request handle over the shared engine's session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _guard(self, operation: str, target: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Document store %s failed for %s: %s", operation, target, exc)
            raise StoreUnavailableError("Document store unavailable") from exc

    def _row(self, path: str) -> Document | None:
        return self.db.query(Document).filter(Document.path == path).first()

    def _rows(self, collection: str) -> list[Document]:
        return self.db.query(Document).filter(Document.collection == collection).order_by(Document.id).all()

    # ── Reads ────────────────────────────────────────────────────────────────

    def get(self, collection: str, doc_id: str) -> dict | None:
        path = join_path(collection, doc_id)
        with self._guard("get", path):
            row = self._row(path)
        return _with_id(row) if row is not None else None

    def query(
        self,
        collection: str,
        field: str,
        op: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """Documents of ``collection`` whose ``field`` matches ``value``.

        ``op`` is ``"=="`` or ``"array-contains"``. Matching happens in Python
        over every document of the collection.
        """
        if op not in QUERY_OPERATORS:
            raise ValueError(f"Unsupported query operator: {op!r}")

        with self._guard("query", collection):
            rows = self._rows(collection)

        docs = []
        for row in rows:
            current = row.data.get(field)
            if op == "==" and current == value:
                docs.append(_with_id(row))
            elif op == "array-contains" and isinstance(current, list) and value in current:
                docs.append(_with_id(row))
        return _ordered(docs, order_by, descending)

    def list_collection(self, collection: str, order_by: str | None = None, descending: bool = False) -> list[dict]:
        with self._guard("list", collection):
            rows = self._rows(collection)
        return _ordered([_with_id(r) for r in rows], order_by, descending)

    # ── Writes ───────────────────────────────────────────────────────────────

    def create(self, collection: str) -> str:
        """Reserve a new document id in ``collection``. Nothing is written."""
        return uuid.uuid4().hex

    def set(self, path: str, data: dict) -> None:
        """Write ``data`` as the whole document at ``path``, replacing any
        previous contents."""
        collection, doc_id = _split_path(path)
        resolved = _resolve(data, timestamp_now())
        with self._guard("set", path):
            row = self._row(path)
            if row is None:
                self.db.add(Document(path=path, collection=collection, doc_id=doc_id, data=resolved))
            else:
                row.data = resolved
            self.db.commit()

    def update(self, path: str, partial: dict) -> None:
        """Merge ``partial`` into the existing document at ``path``.

        Raises NotFoundError if there is no such document.
        """
        now = timestamp_now()
        with self._guard("update", path):
            row = self._row(path)
            if row is None:
                raise NotFoundError(f"No document to update at {path}")

            merged = dict(row.data)
            for field, value in partial.items():
                if isinstance(value, ArrayUnion):
                    current = list(merged.get(field) or [])
                    for item in _resolve(value.items, now):
                        if item not in current:
                            current.append(item)
                    merged[field] = current
                else:
                    merged[field] = _resolve(value, now)

            # Reassign so the JSON column is flagged dirty
            row.data = merged
            self.db.commit()

    def delete(self, path: str) -> None:
        """Remove the document at ``path``. Missing documents are ignored."""
        with self._guard("delete", path):
            row = self._row(path)
            if row is not None:
                self.db.delete(row)
                self.db.commit()

    def ping(self) -> None:
        with self._guard("ping", "documents"):
            self.db.execute(text("SELECT 1"))


def _ordered(docs: list[dict], order_by: str | None, descending: bool) -> list[dict]:
    if order_by is None:
        return docs
    # Documents without the field are left out of an ordered result, as a
    # document database index would.
    present = [d for d in docs if d.get(order_by) is not None]
    return sorted(present, key=lambda d: d[order_by], reverse=descending)


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)
