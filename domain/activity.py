"""
Domain: Activity log entries.

An append-only audit trail of mutating operations performed on the catalog.
Entries are never updated or deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping

from .cart import RestockEntry
from .item import Item
from .sale import SaleRecord
from .time import require_utc_timestamp


class ActivityType(str, Enum):
    ITEM_ADDED = "ITEM_ADDED"
    ITEM_UPDATED = "ITEM_UPDATED"
    ITEM_REMOVED = "ITEM_REMOVED"
    STOCK_UPDATED = "STOCK_UPDATED"
    SALE_COMPLETED = "SALE_COMPLETED"


@dataclass(frozen=True, slots=True)
class ActivityLogEntry:
    entry_id: str
    type: ActivityType
    description: str
    timestamp: datetime
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        require_utc_timestamp("timestamp", self.timestamp)


def item_added(entry_id: str, item: Item, *, at: datetime) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=entry_id,
        type=ActivityType.ITEM_ADDED,
        description=f"New item '{item.name}' (SKU: {item.sku}) added.",
        timestamp=at,
        details={"itemId": item.item_id, "itemName": item.name, "sku": item.sku, "stock": item.stock},
    )


def item_updated(entry_id: str, before: Item, after: Item, *, at: datetime) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=entry_id,
        type=ActivityType.ITEM_UPDATED,
        description=f"Item '{before.name}' (SKU: {before.sku}) updated.",
        timestamp=at,
        details={
            "itemId": after.item_id,
            "itemName": after.name,
            "sku": after.sku,
            "previousStock": before.stock,
            "stock": after.stock,
        },
    )


def item_removed(entry_id: str, item: Item, *, at: datetime) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=entry_id,
        type=ActivityType.ITEM_REMOVED,
        description=f"Item '{item.name}' (SKU: {item.sku}) removed.",
        timestamp=at,
        details={"itemId": item.item_id, "itemName": item.name, "sku": item.sku},
    )


def stock_updated(entry_id: str, entries: Iterable[RestockEntry], *, at: datetime) -> ActivityLogEntry:
    restocked = list(entries)
    summary = ", ".join(f"{entry.quantity} of {entry.name}" for entry in restocked)
    return ActivityLogEntry(
        entry_id=entry_id,
        type=ActivityType.STOCK_UPDATED,
        description=f"Restocked items: {summary}.",
        timestamp=at,
        details={
            "items": [
                {"itemId": entry.item_id, "itemName": entry.name, "quantityRestocked": entry.quantity}
                for entry in restocked
            ]
        },
    )


def sale_completed(entry_id: str, sale: SaleRecord, *, at: datetime, currency: str) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=entry_id,
        type=ActivityType.SALE_COMPLETED,
        description=f"Sale completed for {sale.customer.name}. Total: {currency} {sale.total_amount:,.2f}.",
        timestamp=at,
        details={
            "saleId": sale.sale_id,
            "customerName": sale.customer.name,
            "totalAmount": str(sale.total_amount),
            "itemsSold": [
                {"itemId": line.item_id, "quantity": line.quantity, "price": str(line.unit_price)}
                for line in sale.lines
            ],
        },
    )
