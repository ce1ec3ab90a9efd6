"""
Domain: Stock mutation planning.

Turns a cart (or a single administrator adjustment) into a WriteSet: the fully
validated mapping of item id -> new stock value. Planning never mutates
anything; the WriteSet is applied afterwards by whoever owns the catalog.

Rules implemented here:
- Restock: new_stock = current_stock + quantity. No upper bound. An entry whose
  item is missing from the snapshot raises StaleReferenceError.
- Sale: current stock is always read from the snapshot passed in, never from the
  value captured when the entry was added to the cart. If any entry asks for more
  than is available the whole plan fails with InsufficientStockError; partial
  sales are never planned.
- Entries are evaluated in cart insertion order, which decides which error is
  reported first when several entries conflict.
- Empty carts are rejected with EmptyCartError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Mapping, Tuple, Union

from .catalog import ItemCatalog
from .cart import Cart, PurchaseEntry, RestockEntry
from .errors import EmptyCartError, InsufficientStockError, InvalidStockError, StaleReferenceError
from .item import Item

Snapshot = Union[ItemCatalog, Iterable[Item]]


@dataclass(frozen=True, slots=True)
class StockChange:
    item_id: str
    previous_stock: int
    new_stock: int

    @property
    def delta(self) -> int:
        return self.new_stock - self.previous_stock


@dataclass(frozen=True, slots=True)
class WriteSet:
    """Ordered, validated stock changes for one transaction."""

    changes: Tuple[StockChange, ...]

    def __iter__(self) -> Iterator[StockChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def as_mapping(self) -> Dict[str, int]:
        return {change.item_id: change.new_stock for change in self.changes}

    def new_stock(self, item_id: str) -> int:
        return self.as_mapping()[item_id]


def _index(snapshot: Snapshot) -> Mapping[str, Item]:
    items = snapshot.snapshot() if isinstance(snapshot, ItemCatalog) else snapshot
    return {item.item_id: item for item in items}


def plan_restock(cart: Cart[RestockEntry], snapshot: Snapshot) -> WriteSet:
    if cart.is_empty:
        raise EmptyCartError("Restock list is empty. Add items to restock first.")

    current = _index(snapshot)
    changes = []
    for entry in cart.entries():
        item = current.get(entry.item_id)
        if item is None:
            raise StaleReferenceError(entry.item_id)
        changes.append(StockChange(entry.item_id, item.stock, item.stock + entry.quantity))
    return WriteSet(tuple(changes))


def plan_sale(cart: Cart[PurchaseEntry], snapshot: Snapshot) -> WriteSet:
    if cart.is_empty:
        raise EmptyCartError("Purchase list is empty. Add items to sell first.")

    current = _index(snapshot)
    changes = []
    for entry in cart.entries():
        item = current.get(entry.item_id)
        if item is None:
            raise StaleReferenceError(entry.item_id)
        if item.stock < entry.quantity:
            raise InsufficientStockError(item.item_id, item.stock, entry.quantity, name=item.name)
        changes.append(StockChange(entry.item_id, item.stock, item.stock - entry.quantity))
    return WriteSet(tuple(changes))


def plan_adjustment(item_id: str, new_stock: int, snapshot: Snapshot) -> WriteSet:
    """Plan an administrator's direct stock edit for a single item."""

    if isinstance(new_stock, bool) or not isinstance(new_stock, int) or new_stock < 0:
        raise InvalidStockError(f"stock must be a non-negative integer, got {new_stock!r}")

    item = _index(snapshot).get(item_id)
    if item is None:
        raise StaleReferenceError(item_id)
    if item.stock == new_stock:
        return WriteSet(())
    return WriteSet((StockChange(item_id, item.stock, new_stock),))


__all__ = [
    "StockChange",
    "WriteSet",
    "plan_adjustment",
    "plan_restock",
    "plan_sale",
]
