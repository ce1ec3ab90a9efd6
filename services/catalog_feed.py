"""
Live catalog feed.

Turns the document store's change notifications into a lazy, unbounded sequence
of catalog snapshots, and derives dashboard metrics from each snapshot by full
recomputation (never by patching the previous result).

Usage:
    feed = CatalogFeed(store, namespace)
    with closing(feed.metrics()) as metrics:
        for current in metrics:
            render(current)

Each call to snapshots() starts a new subscription, so a consumer that stopped
can restart by calling it again. Iteration blocks until the next change
arrives; run consumers off the thread that issues writes.
"""

from __future__ import annotations

import logging
import queue
from contextlib import closing
from typing import Callable, Iterator, List, Optional, Tuple

from domain.activity import ActivityLogEntry
from domain.item import Item
from domain.metrics import InventoryMetrics, derive_metrics
from repositories.activity_repository import documents_to_activity
from repositories.document_store import ACTIVITIES, ITEMS, Document, DocumentStore, Namespace, StoreError, Unsubscribe
from repositories.item_repository import document_to_item, list_items

logger = logging.getLogger(__name__)

Snapshot = Tuple[Item, ...]


class CatalogFeed:
    def __init__(
        self,
        store: DocumentStore,
        namespace: Namespace,
        *,
        poll_interval: Optional[float] = None,
    ) -> None:
        """
        Args:
            store: Document store to subscribe to.
            namespace: Caller's namespace.
            poll_interval: When set and the store supports refresh(), re-read the
                items collection after this many idle seconds to pick up writes
                made by other processes.
        """

        self._store = store
        self._namespace = namespace
        self._poll_interval = poll_interval

    def snapshots(self) -> Iterator[Snapshot]:
        """Yield the current snapshot, then one fresh snapshot per change."""

        collection = self._namespace.collection(ITEMS)
        pending: "queue.Queue[List[Document]]" = queue.Queue()
        unsubscribe = self._store.subscribe(collection, pending.put)
        try:
            yield tuple(list_items(self._store, self._namespace))
            while True:
                docs = self._next_change(pending, collection)
                yield tuple(document_to_item(doc) for doc in docs)
        finally:
            unsubscribe()

    def metrics(self) -> Iterator[InventoryMetrics]:
        """Yield freshly derived metrics for every snapshot."""

        with closing(self.snapshots()) as snapshots:
            for snapshot in snapshots:
                yield derive_metrics(snapshot)

    def _next_change(self, pending: "queue.Queue[List[Document]]", collection: str) -> List[Document]:
        refresh = getattr(self._store, "refresh", None)
        while True:
            try:
                return pending.get(timeout=self._poll_interval)
            except queue.Empty:
                if refresh is not None:
                    refresh(collection)


def watch_activity(
    store: DocumentStore,
    namespace: Namespace,
    on_entries: Callable[[List[ActivityLogEntry]], None],
) -> Unsubscribe:
    """
    Subscribe to the activity log, newest entries first.

    Failures here never block stock operations: a subscription that cannot be
    opened, or a change that cannot be read, degrades to an empty log view.
    """

    collection = namespace.collection(ACTIVITIES)

    def handle(docs: List[Document]) -> None:
        try:
            entries = documents_to_activity(docs)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unreadable activity log change; showing empty log", extra={"error": str(e)})
            entries = []
        on_entries(entries)

    try:
        return store.subscribe(collection, handle)
    except StoreError as e:
        logger.warning("Activity log subscription failed; showing empty log", extra={"error": str(e)})
        on_entries([])
        return lambda: None


__all__ = ["CatalogFeed", "watch_activity"]
