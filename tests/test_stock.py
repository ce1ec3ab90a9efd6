"""
Tests for `domain/stock.py`.

Covers contract rules:
- Restock adds quantities with no upper bound.
- A sale is planned against the snapshot passed in, never the stock captured in
  the cart; any short entry rejects the whole plan.
- Entries are evaluated in insertion order.
- Missing items raise StaleReferenceError; empty carts raise EmptyCartError.
- Adjustments produce a single change, or none when stock is unchanged.
"""

from __future__ import annotations

import pytest

from conftest import make_item
from domain.cart import purchase_cart, restock_cart
from domain.catalog import ItemCatalog
from domain.errors import EmptyCartError, InsufficientStockError, InvalidStockError, StaleReferenceError
from domain.stock import plan_adjustment, plan_restock, plan_sale


def test_plan_restock_adds_aggregated_quantity() -> None:
    """Verify a restock of +5 and +3 on stock 0 plans a new stock of 8."""

    item = make_item("item-a", stock=0)
    cart = restock_cart()
    cart.add(item, 5)
    cart.add(item, 3)

    write_set = plan_restock(cart, ItemCatalog([item]))

    assert write_set.as_mapping() == {"item-a": 8}
    assert write_set.changes[0].delta == 8


def test_plan_sale_reads_stock_from_snapshot_not_cart() -> None:
    """Verify a cart built against old stock is validated against the current snapshot."""

    stale = make_item("item-a", stock=10)
    cart = purchase_cart()
    cart.add(stale, 10)

    current = ItemCatalog([stale.with_stock(0)])

    with pytest.raises(InsufficientStockError) as exc_info:
        plan_sale(cart, current)

    error = exc_info.value
    assert (error.item_id, error.available, error.requested) == ("item-a", 0, 10)


def test_plan_sale_is_all_or_nothing() -> None:
    """Verify one short entry rejects the plan and nothing is produced."""

    a = make_item("a", stock=5)
    b = make_item("b", stock=1)
    cart = purchase_cart()
    cart.add(a, 2)
    cart.add(b, 1)

    catalog = ItemCatalog([a, b.with_stock(0)])

    with pytest.raises(InsufficientStockError) as exc_info:
        plan_sale(cart, catalog)
    assert exc_info.value.item_id == "b"
    assert catalog.get("a").stock == 5


def test_plan_sale_reports_first_conflict_in_insertion_order() -> None:
    a = make_item("a", stock=5)
    b = make_item("b", stock=5)
    cart = purchase_cart()
    cart.add(b, 3)
    cart.add(a, 3)

    with pytest.raises(InsufficientStockError) as exc_info:
        plan_sale(cart, [a.with_stock(0), b.with_stock(0)])
    assert exc_info.value.item_id == "b"


def test_plan_sale_subtracts_quantities() -> None:
    a = make_item("a", stock=10)
    cart = purchase_cart()
    cart.add(a, 10)

    assert plan_sale(cart, [a]).as_mapping() == {"a": 0}


def test_missing_item_raises_stale_reference() -> None:
    a = make_item("a", stock=3)
    cart = restock_cart()
    cart.add(a, 1)

    with pytest.raises(StaleReferenceError):
        plan_restock(cart, ItemCatalog())

    sale_cart = purchase_cart()
    sale_cart.add(a, 1)
    with pytest.raises(StaleReferenceError):
        plan_sale(sale_cart, [])


def test_empty_carts_are_rejected() -> None:
    with pytest.raises(EmptyCartError):
        plan_restock(restock_cart(), [])
    with pytest.raises(EmptyCartError):
        plan_sale(purchase_cart(), [])


def test_plan_adjustment() -> None:
    a = make_item("a", stock=4)

    assert plan_adjustment("a", 9, [a]).as_mapping() == {"a": 9}
    assert len(plan_adjustment("a", 4, [a])) == 0

    with pytest.raises(InvalidStockError):
        plan_adjustment("a", -1, [a])
    with pytest.raises(StaleReferenceError):
        plan_adjustment("ghost", 1, [a])
