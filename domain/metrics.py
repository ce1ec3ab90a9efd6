"""
Domain: Dashboard metrics.

Pure functions over a catalog snapshot (and the persisted sales). Metrics are
always recomputed from scratch for each snapshot, never patched incrementally.

- total_items     = number of items
- stock_out_items = number of items with stock == 0
- total_capital   = sum(stock * cost_price)
- low_stock       = items with stock <= reorder_level (boundary included)
- total_sales     = sum(total_amount) over all sale records
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from .item import MINOR_UNIT, Item
from .sale import SaleRecord


@dataclass(frozen=True, slots=True)
class InventoryMetrics:
    total_items: int
    stock_out_items: int
    total_capital: Decimal
    low_stock: Tuple[Item, ...]

    @property
    def low_stock_count(self) -> int:
        return len(self.low_stock)


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    inventory: InventoryMetrics
    total_sales: Decimal
    sale_count: int
    recent_sales: Tuple[SaleRecord, ...]


def derive_metrics(snapshot: Iterable[Item]) -> InventoryMetrics:
    items = tuple(snapshot)
    capital = sum((item.capital for item in items), Decimal("0"))
    return InventoryMetrics(
        total_items=len(items),
        stock_out_items=sum(1 for item in items if item.is_out_of_stock),
        total_capital=capital.quantize(MINOR_UNIT),
        low_stock=tuple(item for item in items if item.is_low_stock),
    )


def total_sales(sales: Iterable[SaleRecord]) -> Decimal:
    return sum((sale.total_amount for sale in sales), Decimal("0")).quantize(MINOR_UNIT)


def summarize(snapshot: Iterable[Item], sales: Iterable[SaleRecord], *, recent: int = 10) -> DashboardSummary:
    """Combine inventory metrics with sales totals; recent sales are newest first."""

    all_sales = sorted(sales, key=lambda sale: sale.sold_at, reverse=True)
    return DashboardSummary(
        inventory=derive_metrics(snapshot),
        total_sales=total_sales(all_sales),
        sale_count=len(all_sales),
        recent_sales=tuple(all_sales[:recent]),
    )
