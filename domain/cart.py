"""
Domain: Carts (pending quantity changes, not yet committed).

A cart accumulates quantities per item before a restock or a sale is committed.
The same aggregation logic backs both carts; only the entry shape differs:
- RestockEntry: units to add, priced at cost.
- PurchaseEntry: units to sell, priced at the selling price.

Rules implemented here:
- add() requires a positive integer quantity (InvalidQuantityError otherwise).
- Repeat additions of the same item sum quantities; the snapshot taken on the
  first addition (name, sku, price) is kept.
- remove() of an absent item is a no-op.
- Purchase carts refuse a cumulative quantity above the stock seen when adding.
  This is an early guard for the user only; the sale is re-validated against the
  current catalog at commit time.

Carts are ephemeral and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from .errors import InsufficientStockError, InvalidQuantityError
from .item import MINOR_UNIT, Item


def _require_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(f"quantity must be a positive integer, got {quantity!r}")
    if quantity <= 0:
        raise InvalidQuantityError(f"quantity must be greater than zero, got {quantity}")
    return quantity


@dataclass(frozen=True, slots=True)
class RestockEntry:
    item_id: str
    name: str
    sku: str
    unit_price: Decimal  # cost price at the time of addition
    quantity: int
    stock_at_add: int

    @staticmethod
    def from_item(item: Item, quantity: int) -> "RestockEntry":
        return RestockEntry(
            item_id=item.item_id,
            name=item.name,
            sku=item.sku,
            unit_price=item.cost_price,
            quantity=quantity,
            stock_at_add=item.stock,
        )

    def with_quantity(self, quantity: int) -> "RestockEntry":
        return replace(self, quantity=quantity)


@dataclass(frozen=True, slots=True)
class PurchaseEntry:
    item_id: str
    name: str
    sku: str
    unit_price: Decimal  # selling price at the time of addition
    quantity: int
    stock_at_add: int

    @staticmethod
    def from_item(item: Item, quantity: int) -> "PurchaseEntry":
        return PurchaseEntry(
            item_id=item.item_id,
            name=item.name,
            sku=item.sku,
            unit_price=item.selling_price,
            quantity=quantity,
            stock_at_add=item.stock,
        )

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(MINOR_UNIT)

    def with_quantity(self, quantity: int) -> "PurchaseEntry":
        return replace(self, quantity=quantity)


EntryT = TypeVar("EntryT", RestockEntry, PurchaseEntry)


class Cart(Generic[EntryT]):
    """
    Accumulates entries keyed by item id, in insertion order.

    ``entry_factory`` builds a new entry from the item snapshot and the first
    quantity. When ``limit_to_stock`` is set, cumulative quantities may not
    exceed the item's stock at the time of each addition.
    """

    def __init__(self, entry_factory: Callable[[Item, int], EntryT], *, limit_to_stock: bool = False) -> None:
        self._entry_factory = entry_factory
        self._limit_to_stock = limit_to_stock
        self._entries: Dict[str, EntryT] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EntryT]:
        return iter(self.entries())

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def add(self, item: Item, quantity: int) -> EntryT:
        _require_quantity(quantity)

        existing = self._entries.get(item.item_id)
        new_quantity = quantity if existing is None else existing.quantity + quantity

        if self._limit_to_stock and new_quantity > item.stock:
            raise InsufficientStockError(item.item_id, item.stock, new_quantity, name=item.name)

        if existing is None:
            entry = self._entry_factory(item, quantity)
        else:
            entry = existing.with_quantity(new_quantity)
        self._entries[item.item_id] = entry
        return entry

    def remove(self, item_id: str) -> None:
        self._entries.pop(item_id, None)

    def get(self, item_id: str) -> Optional[EntryT]:
        return self._entries.get(item_id)

    def entries(self) -> Tuple[EntryT, ...]:
        return tuple(self._entries.values())

    def total(self) -> Decimal:
        """Sum of quantity x unit price, exact to the currency's minor unit."""

        total = sum((entry.unit_price * entry.quantity for entry in self._entries.values()), Decimal("0"))
        return total.quantize(MINOR_UNIT)

    def clear(self) -> None:
        self._entries.clear()


def restock_cart() -> Cart[RestockEntry]:
    return Cart(RestockEntry.from_item)


def purchase_cart() -> Cart[PurchaseEntry]:
    return Cart(PurchaseEntry.from_item, limit_to_stock=True)


__all__ = [
    "Cart",
    "PurchaseEntry",
    "RestockEntry",
    "purchase_cart",
    "restock_cart",
]
