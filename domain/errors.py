"""
Domain: Typed errors raised by the inventory transaction engine.

Every error carries a machine-readable ``code`` so the HTTP layer and callers
can branch on type instead of parsing messages.

    InventoryError
    +-- InvalidQuantityError
    |   +-- EmptyCartError
    +-- InvalidStockError
    +-- NotFoundError
    +-- StaleReferenceError
    +-- InsufficientStockError
    +-- UnauthorizedError
    +-- TransactionFailedError
"""

from __future__ import annotations

from typing import Sequence


class InventoryError(Exception):
    """Base class for all engine errors."""

    code: str = "INVENTORY_ERROR"


class InvalidQuantityError(InventoryError, ValueError):
    """A cart quantity was not a positive integer."""

    code = "INVALID_QUANTITY"


class EmptyCartError(InvalidQuantityError):
    """A commit was attempted with nothing in the cart."""

    code = "EMPTY_CART"


class InvalidStockError(InventoryError, ValueError):
    """An operation would leave an item with negative (or non-integer) stock."""

    code = "INVALID_STOCK"


class NotFoundError(InventoryError, LookupError):
    code = "NOT_FOUND"

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class StaleReferenceError(InventoryError):
    """A cart entry references an item that no longer exists in the snapshot."""

    code = "STALE_REFERENCE"

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item {item_id} no longer exists in the catalog")
        self.item_id = item_id


class InsufficientStockError(InventoryError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: str, available: int, requested: int, name: str | None = None) -> None:
        label = name or item_id
        super().__init__(f"Not enough stock for {label}. Available: {available}, Requested: {requested}")
        self.item_id = item_id
        self.available = available
        self.requested = requested


class UnauthorizedError(InventoryError, PermissionError):
    code = "UNAUTHORIZED"

    def __init__(self, action: str) -> None:
        super().__init__(f"Unauthorized: administrator rights required to {action}")
        self.action = action


class TransactionFailedError(InventoryError):
    """
    The document store rejected a write while a transaction was committing.

    No rollback is attempted. ``applied_item_ids`` lists the items whose stock
    write had already gone through, so the caller can tell the user which
    records must be re-checked.
    """

    code = "TRANSACTION_FAILED"

    def __init__(self, message: str, applied_item_ids: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.applied_item_ids = tuple(applied_item_ids)


__all__ = [
    "InventoryError",
    "InvalidQuantityError",
    "EmptyCartError",
    "InvalidStockError",
    "NotFoundError",
    "StaleReferenceError",
    "InsufficientStockError",
    "UnauthorizedError",
    "TransactionFailedError",
]
