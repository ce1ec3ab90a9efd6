"""
Tests for `domain/metrics.py`.

Covers contract rules:
- Metrics are a pure function of the snapshot.
- total_capital = sum(stock * cost_price), exact to the minor unit.
- Low stock includes the stock == reorder_level boundary.
- Recent sales are newest first.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from conftest import T0, make_item
from domain.metrics import derive_metrics, summarize, total_sales
from domain.sale import CustomerContact, SaleLine, SaleRecord


def _sale(sale_id: str, minutes: int, price: str, quantity: int = 1) -> SaleRecord:
    item = make_item("item-a", stock=100, selling_price=price)
    return SaleRecord.from_lines(
        sale_id,
        CustomerContact(name="Jane", address="1 Road", phone="555"),
        [SaleLine.for_item(item, quantity)],
        sold_at=T0 + timedelta(minutes=minutes),
    )


def test_derive_metrics_from_snapshot() -> None:
    snapshot = [
        make_item("a", stock=50, cost_price="150", reorder_level=10),
        make_item("b", stock=0, cost_price="80", reorder_level=5),
        make_item("c", stock=20, cost_price="400", reorder_level=20),
        make_item("d", stock=8, cost_price="1200", reorder_level=10),
    ]

    metrics = derive_metrics(snapshot)

    assert metrics.total_items == 4
    assert metrics.stock_out_items == 1
    assert metrics.total_capital == Decimal("25100.00")
    assert [item.item_id for item in metrics.low_stock] == ["b", "c", "d"]
    assert metrics.low_stock_count == 3


def test_metrics_of_empty_snapshot() -> None:
    metrics = derive_metrics([])
    assert metrics.total_items == 0
    assert metrics.total_capital == Decimal("0.00")
    assert metrics.low_stock == ()


def test_metrics_are_recomputed_not_patched() -> None:
    """Verify deriving twice from different snapshots gives independent results."""

    first = derive_metrics([make_item("a", stock=1)])
    second = derive_metrics([make_item("a", stock=100, reorder_level=5)])

    assert first.low_stock_count == 1
    assert second.low_stock_count == 0


def test_total_sales_is_exact() -> None:
    sales = [_sale("s1", 0, "0.10", 3), _sale("s2", 1, "0.20")]
    assert total_sales(sales) == Decimal("0.50")


def test_summarize_orders_recent_sales_newest_first() -> None:
    sales = [_sale("old", 0, "10"), _sale("new", 5, "10"), _sale("mid", 2, "10")]

    summary = summarize([], sales, recent=2)

    assert [sale.sale_id for sale in summary.recent_sales] == ["new", "mid"]
    assert summary.sale_count == 3
    assert summary.total_sales == Decimal("30.00")
