"""
Tests for `services/dashboard_service.py` and `services/seed_service.py`.

Covers contract rules:
- The dashboard is recomputed from the store on every call.
- A failing activity read degrades to an empty log.
- Demo data is seeded only into empty collections.
"""

from __future__ import annotations

from decimal import Decimal

from conftest import StepClock, make_details, make_item
from repositories.document_store import ACTIVITIES, InMemoryDocumentStore, StoreError
from repositories.item_repository import list_items
from repositories.sale_repository import list_sales
from services.dashboard_service import load_activity, load_dashboard, load_low_stock
from services.seed_service import DEMO_SALE_ID, seed_demo_data


def test_dashboard_over_seeded_demo_data(store, namespace) -> None:
    result = seed_demo_data(store, namespace, clock=StepClock())

    assert result.seeded
    assert len(result.items_created) == 4

    summary = load_dashboard(store, namespace)
    assert summary.inventory.total_items == 4
    assert summary.inventory.stock_out_items == 1
    assert summary.inventory.total_capital == Decimal("27100.00")
    assert summary.inventory.low_stock_count == 2
    assert summary.total_sales == Decimal("1150.00")
    assert [sale.sale_id for sale in summary.recent_sales] == [DEMO_SALE_ID]


def test_seed_is_noop_when_data_exists(store, namespace) -> None:
    seed_demo_data(store, namespace, clock=StepClock())
    again = seed_demo_data(store, namespace, clock=StepClock())

    assert not again.seeded
    assert len(list_items(store, namespace)) == 4
    assert len(list_sales(store, namespace)) == 1


def test_low_stock_includes_boundary(store, namespace, seed_items) -> None:
    seed_items(make_item("a", stock=5, reorder_level=5), make_item("b", stock=6, reorder_level=5))

    assert [item.item_id for item in load_low_stock(store, namespace)] == ["a"]


def test_activity_limit(store, namespace, orchestrator, admin) -> None:
    for name in ("One", "Two", "Three"):
        orchestrator.add_item(admin, make_details(name))

    entries = load_activity(store, namespace, limit=2)
    assert [entry.details["itemName"] for entry in entries] == ["Three", "Two"]


def test_activity_read_failure_returns_empty_log(namespace) -> None:
    class BrokenStore(InMemoryDocumentStore):
        def read(self, collection):
            if collection.endswith(ACTIVITIES):
                raise StoreError("offline")
            return super().read(collection)

    assert load_activity(BrokenStore(), namespace) == []
