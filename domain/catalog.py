"""
Domain: Item catalog.

In-memory view of every stock-keeping unit for one namespace. The catalog is the
single source of truth for stock inside the process.

Rules implemented here:
- get/remove of an unknown item raise NotFoundError (removal is not idempotent).
- No operation may leave an item with negative stock (InvalidStockError).
- Stock values only change through apply(write_set); upsert of an existing item
  keeps whatever stock the caller's snapshot carries, which the orchestrator
  always takes from the catalog itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import InvalidStockError, NotFoundError
from .item import Item

if TYPE_CHECKING:
    from .stock import WriteSet


class ItemCatalog:
    """Ordered collection of items keyed by item_id (insertion order is kept)."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: Dict[str, Item] = {}
        for item in items:
            self.upsert(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(self.snapshot())

    def upsert(self, item: Item) -> None:
        if item.stock < 0:
            raise InvalidStockError(f"stock must be >= 0, got {item.stock}")
        self._items[item.item_id] = item

    def remove(self, item_id: str) -> Item:
        try:
            return self._items.pop(item_id)
        except KeyError:
            raise NotFoundError("Item", item_id) from None

    def get(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def find(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def snapshot(self) -> Tuple[Item, ...]:
        """Immutable, ordered view of the current items."""

        return tuple(self._items.values())

    def search(self, query: str) -> List[Item]:
        return [item for item in self._items.values() if item.matches(query)]

    def apply(self, write_set: "WriteSet") -> None:
        """
        Apply a validated WriteSet.

        Every referenced item is resolved first so that an unknown id leaves the
        catalog untouched.
        """

        updated = [self.get(change.item_id).with_stock(change.new_stock) for change in write_set]
        for item in updated:
            self._items[item.item_id] = item


__all__ = ["ItemCatalog"]
