"""
Supabase-backed DocumentStore.

All collections live in a single table of JSON documents:

    create table documents (
        collection      text not null,
        doc_id          text not null,
        data            jsonb not null,
        created_at_utc  timestamptz not null default now(),
        updated_at_utc  timestamptz not null default now(),
        primary key (collection, doc_id)
    );

Change notifications are delivered for writes issued through this store. Writes
made by other processes are picked up by calling refresh(collection), which
re-reads the collection and notifies subscribers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping

from postgrest.exceptions import APIError

from domain.time import utcnow
from repositories.document_store import ChangeFeed, ChangeListener, Document, StoreError, Unsubscribe

logger = logging.getLogger(__name__)

# Keep this aligned with your database schema.
_DOCUMENTS_TABLE: str = "documents"


class SupabaseDocumentStore:
    def __init__(self, client: Any, *, table: str = _DOCUMENTS_TABLE) -> None:
        self._client = client
        self._table = table
        self._feed = ChangeFeed()

    def _execute(self, action: str, build: Callable[[], Any]) -> Any:
        """Run a query builder and normalize every failure into StoreError."""

        try:
            response = build().execute()
        except APIError as e:
            logger.error("Supabase rejected %s", action, extra={"table": self._table, "error": str(e)})
            raise StoreError(f"Failed to {action}: {e}") from e

        error = getattr(response, "error", None)
        if error:
            raise StoreError(f"Failed to {action}: {error}")
        return response

    def read(self, collection: str) -> List[Document]:
        response = self._execute(
            "read documents",
            lambda: self._client.table(self._table)
            .select("doc_id, data")
            .eq("collection", collection)
            .order("created_at_utc"),
        )
        rows = getattr(response, "data", None) or []
        return [dict(row.get("data") or {}, id=str(row["doc_id"])) for row in rows]

    def write(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        if not doc_id:
            raise StoreError("Document id is required")

        payload: dict[str, Any] = {
            "collection": collection,
            "doc_id": doc_id,
            "data": {key: value for key, value in fields.items() if key != "id"},
            "updated_at_utc": utcnow().isoformat(),
        }
        self._execute(
            "write document",
            lambda: self._client.table(self._table).upsert(payload, on_conflict="collection,doc_id"),
        )
        self._notify(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        response = self._execute(
            "delete document",
            lambda: self._client.table(self._table)
            .delete()
            .eq("collection", collection)
            .eq("doc_id", doc_id),
        )
        deleted = getattr(response, "data", None) or []
        if not deleted:
            raise StoreError(f"Document not found: {collection}/{doc_id}")
        self._notify(collection)

    def subscribe(self, collection: str, on_change: ChangeListener) -> Unsubscribe:
        return self._feed.add(collection, on_change)

    def refresh(self, collection: str) -> None:
        """Re-read a collection and notify subscribers (picks up external writers)."""

        self._notify(collection)

    def _notify(self, collection: str) -> None:
        """Notify subscribers. A failed re-read never fails the write that triggered it."""

        if not self._feed.has_listeners(collection):
            return
        try:
            documents = self.read(collection)
        except StoreError as e:
            logger.warning(
                "Change notification skipped; collection could not be re-read",
                extra={"collection": collection, "error": str(e)},
            )
            return
        self._feed.notify(collection, documents)


__all__ = ["SupabaseDocumentStore"]
