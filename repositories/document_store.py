"""
Document store (persistence boundary).

The engine reaches persistence only through the DocumentStore protocol:
- read(collection)                  -> list of documents (each has an "id" key)
- write(collection, doc_id, fields) -> create or replace a document
- delete(collection, doc_id)        -> hard delete
- subscribe(collection, on_change)  -> unsubscribe callable

Collections are full paths scoped by a Namespace
(``artifacts/<app_id>/users/<user_id>/<collection>``).

Store failures are raised as StoreError. Change notifications are delivered
after the write that caused them; callers must not assume any ordering between
their own writes and notifications caused by other writers.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Protocol

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
ChangeListener = Callable[[List[Document]], None]
Unsubscribe = Callable[[], None]

ITEMS = "items"
SALES = "sales"
ACTIVITIES = "activities"


class StoreError(RuntimeError):
    """Raised when the document store rejects or fails an operation."""


@dataclass(frozen=True, slots=True)
class Namespace:
    """Tenant/session scope supplied by the caller (app id + user id)."""

    app_id: str
    user_id: str

    def __post_init__(self) -> None:
        for name in ("app_id", "user_id"):
            value = getattr(self, name)
            if not value or "/" in value:
                raise ValueError(f"{name} must be a non-empty string without '/'")

    @property
    def root(self) -> str:
        return f"artifacts/{self.app_id}/users/{self.user_id}"

    def collection(self, name: str) -> str:
        return f"{self.root}/{name}"


class DocumentStore(Protocol):
    def read(self, collection: str) -> List[Document]:
        ...

    def write(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def subscribe(self, collection: str, on_change: ChangeListener) -> Unsubscribe:
        ...


class ChangeFeed:
    """
    Listener registry shared by the store implementations.

    notify() re-reads the collection and hands the fresh documents to every
    listener. A failing listener is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[ChangeListener]] = {}

    def add(self, collection: str, on_change: ChangeListener) -> Unsubscribe:
        listeners = self._listeners.setdefault(collection, [])
        listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in listeners:
                listeners.remove(on_change)

        return unsubscribe

    def has_listeners(self, collection: str) -> bool:
        return bool(self._listeners.get(collection))

    def notify(self, collection: str, documents: List[Document]) -> None:
        for listener in list(self._listeners.get(collection, ())):
            try:
                listener(copy.deepcopy(documents))
            except Exception:
                logger.exception("Change listener failed", extra={"collection": collection})


class InMemoryDocumentStore:
    """
    Process-local DocumentStore.

    Used for local runs (STORE_BACKEND=memory) and tests. Documents keep their
    insertion order; reads return deep copies so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._feed = ChangeFeed()

    def read(self, collection: str) -> List[Document]:
        docs = self._collections.get(collection, {})
        return [dict(copy.deepcopy(fields), id=doc_id) for doc_id, fields in docs.items()]

    def write(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        if not doc_id:
            raise StoreError("Document id is required")
        stored = {key: value for key, value in copy.deepcopy(dict(fields)).items() if key != "id"}
        self._collections.setdefault(collection, {})[doc_id] = stored
        self._feed.notify(collection, self.read(collection))

    def delete(self, collection: str, doc_id: str) -> None:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise StoreError(f"Document not found: {collection}/{doc_id}")
        del docs[doc_id]
        self._feed.notify(collection, self.read(collection))

    def subscribe(self, collection: str, on_change: ChangeListener) -> Unsubscribe:
        return self._feed.add(collection, on_change)


__all__ = [
    "ACTIVITIES",
    "ITEMS",
    "SALES",
    "ChangeFeed",
    "ChangeListener",
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Namespace",
    "StoreError",
    "Unsubscribe",
]
