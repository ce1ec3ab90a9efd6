"""
Tests for `domain/item.py`.

Covers contract rules:
- Stock is a non-negative integer (InvalidStockError otherwise).
- Prices are kept exactly to the minor unit.
- Low stock iff stock <= reorder_level (boundary included); out of stock iff stock == 0.
- Generated SKUs follow SKU-<millis>-<6 chars>.
- Search matches name, SKU or brand, case-insensitively.
"""

from __future__ import annotations

import re
from dataclasses import FrozenInstanceError
from datetime import datetime
from decimal import Decimal

import pytest

from conftest import T0, make_details, make_item
from domain.errors import InvalidStockError
from domain.item import Item, generate_sku, to_money


def test_item_rejects_negative_or_non_integer_stock() -> None:
    """Verify stock < 0 or a non-integer stock raises InvalidStockError."""

    with pytest.raises(InvalidStockError):
        make_item(stock=-1)

    with pytest.raises(InvalidStockError):
        make_item().with_stock(-5)

    with pytest.raises(InvalidStockError):
        make_item().with_stock(1.5)  # type: ignore[arg-type]


def test_item_details_require_text_fields_and_non_negative_prices() -> None:
    """Verify name/description/brand are required and prices cannot be negative."""

    with pytest.raises(ValueError):
        make_details(name="   ")

    with pytest.raises(ValueError):
        make_details(cost_price="-1")

    with pytest.raises(ValueError):
        make_details(reorder_level=-1)


def test_prices_are_quantized_to_minor_unit() -> None:
    """Verify prices are stored as exact decimals with two places."""

    item = make_item(cost_price="0.1", selling_price="19.999")
    assert item.cost_price == Decimal("0.10")
    assert item.selling_price == Decimal("20.00")
    assert to_money("0.105") == Decimal("0.11")


def test_to_money_rejects_non_numbers() -> None:
    with pytest.raises(ValueError):
        to_money("abc")
    with pytest.raises(ValueError):
        to_money(True)
    with pytest.raises(ValueError):
        to_money("NaN")


def test_low_stock_boundary_is_inclusive() -> None:
    """Verify stock == reorder_level counts as low stock, one above does not."""

    assert make_item(stock=5, reorder_level=5).is_low_stock is True
    assert make_item(stock=6, reorder_level=5).is_low_stock is False
    assert make_item(stock=0, reorder_level=0).is_low_stock is True


def test_out_of_stock_iff_zero() -> None:
    assert make_item(stock=0).is_out_of_stock is True
    assert make_item(stock=1).is_out_of_stock is False


def test_capital_is_stock_times_cost() -> None:
    assert make_item(stock=3, cost_price="150.50").capital == Decimal("451.50")


def test_generated_sku_format() -> None:
    """Verify SKU-<epoch millis>-<6 uppercase base36 chars>."""

    sku = generate_sku(T0)
    millis = int(T0.timestamp() * 1000)
    assert re.fullmatch(rf"SKU-{millis}-[A-Z0-9]{{6}}", sku)


def test_item_create_generates_sku_when_missing() -> None:
    created = Item.create("item-x", make_details(), created_at=T0)
    assert created.sku.startswith("SKU-")
    assert created.created_at == T0


def test_item_created_at_must_be_utc() -> None:
    with pytest.raises(ValueError):
        Item.create("item-x", make_details(), created_at=datetime(2025, 1, 1))


def test_with_details_keeps_identity_and_stock() -> None:
    """Verify an edit changes descriptive fields but never sku or stock."""

    item = make_item(stock=7)
    edited = item.with_details(make_details("Premium Filter", stock=99, selling_price="300"))

    assert edited.item_id == item.item_id
    assert edited.sku == item.sku
    assert edited.stock == 7
    assert edited.name == "Premium Filter"
    assert edited.selling_price == Decimal("300.00")


def test_matches_name_sku_or_brand_case_insensitive() -> None:
    item = make_item("item-a", "Brake Pad Set", brand="BrakePro", sku="SKU-123-ABCDEF")

    assert item.matches("brake")
    assert item.matches("abcdef")
    assert item.matches("BRAKEPRO")
    assert item.matches("  ")
    assert not item.matches("tire")


def test_item_is_immutable() -> None:
    item = make_item()
    with pytest.raises(FrozenInstanceError):
        item.stock = 3  # type: ignore[misc]


@pytest.mark.parametrize("reorder_level", [2.5, True, -1])
def test_item_rejects_invalid_reorder_level(reorder_level) -> None:
    """Verify an Item built directly enforces the same integer reorder level as ItemDetails."""

    with pytest.raises(ValueError):
        Item(
            item_id="item-a",
            sku="SKU-1",
            name="Oil Filter",
            description="d",
            brand="b",
            stock=1,
            cost_price=Decimal("1"),
            selling_price=Decimal("2"),
            reorder_level=reorder_level,
        )
