"""
Tests for `domain/catalog.py`.

Covers contract rules:
- get/remove of an unknown item raise NotFoundError (removal is not idempotent).
- apply(write_set) changes stock only, and leaves the catalog untouched when
  any referenced item is unknown.
- snapshot() is an immutable, ordered view.
"""

from __future__ import annotations

import pytest

from conftest import make_item
from domain.catalog import ItemCatalog
from domain.errors import NotFoundError
from domain.stock import StockChange, WriteSet


def test_get_unknown_item_raises_not_found() -> None:
    catalog = ItemCatalog([make_item("item-a")])

    with pytest.raises(NotFoundError):
        catalog.get("missing")
    assert catalog.find("missing") is None


def test_remove_is_not_idempotent() -> None:
    """Verify the second removal of the same item raises NotFoundError."""

    catalog = ItemCatalog([make_item("item-a")])

    removed = catalog.remove("item-a")
    assert removed.item_id == "item-a"
    assert "item-a" not in catalog

    with pytest.raises(NotFoundError):
        catalog.remove("item-a")


def test_snapshot_keeps_insertion_order() -> None:
    catalog = ItemCatalog([make_item("b"), make_item("a"), make_item("c")])
    assert [item.item_id for item in catalog.snapshot()] == ["b", "a", "c"]
    assert isinstance(catalog.snapshot(), tuple)


def test_apply_write_set_updates_stock() -> None:
    catalog = ItemCatalog([make_item("a", stock=10), make_item("b", stock=2)])

    catalog.apply(WriteSet((StockChange("a", 10, 4), StockChange("b", 2, 9))))

    assert catalog.get("a").stock == 4
    assert catalog.get("b").stock == 9


def test_apply_with_unknown_item_changes_nothing() -> None:
    """Verify an unknown id in a WriteSet leaves every item as it was."""

    catalog = ItemCatalog([make_item("a", stock=10)])

    with pytest.raises(NotFoundError):
        catalog.apply(WriteSet((StockChange("a", 10, 3), StockChange("ghost", 1, 0))))

    assert catalog.get("a").stock == 10


def test_search_filters_by_query() -> None:
    catalog = ItemCatalog([make_item("a", "Oil Filter"), make_item("b", "Tire", brand="TireX")])

    assert [item.item_id for item in catalog.search("tirex")] == ["b"]
    assert len(catalog.search("")) == 2
