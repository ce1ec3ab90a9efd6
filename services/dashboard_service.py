"""
Dashboard service.

Read-only views over the current state of a namespace: inventory metrics,
sales totals, the low-stock list and the activity log. Every call re-reads the
store and recomputes from scratch.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from domain.activity import ActivityLogEntry
from domain.item import Item
from domain.metrics import DashboardSummary, derive_metrics, summarize
from repositories.activity_repository import list_activity
from repositories.document_store import DocumentStore, Namespace, StoreError
from repositories.item_repository import list_items
from repositories.sale_repository import list_sales

logger = logging.getLogger(__name__)


def load_dashboard(store: DocumentStore, namespace: Namespace, *, recent: int = 10) -> DashboardSummary:
    """
    Build the dashboard summary for a namespace.

    Example:
        summary = load_dashboard(store, namespace)
        print(f"{summary.inventory.total_items} items, {summary.inventory.low_stock_count} low on stock")
        print(f"Total sales: {summary.total_sales}")
    """

    return summarize(list_items(store, namespace), list_sales(store, namespace), recent=recent)


def load_low_stock(store: DocumentStore, namespace: Namespace) -> Tuple[Item, ...]:
    return derive_metrics(list_items(store, namespace)).low_stock


def load_activity(store: DocumentStore, namespace: Namespace, *, limit: Optional[int] = None) -> List[ActivityLogEntry]:
    """
    Return the activity log, newest first.

    A failing read degrades to an empty list (logged) instead of raising, so the
    log view can never block the rest of the dashboard.
    """

    try:
        entries = list_activity(store, namespace)
    except (StoreError, KeyError, TypeError, ValueError) as e:
        logger.warning(
            "Activity log unavailable; showing empty log",
            extra={"namespace": namespace.root, "error": str(e)},
        )
        return []
    return entries if limit is None else entries[:limit]


__all__ = ["load_activity", "load_dashboard", "load_low_stock"]
