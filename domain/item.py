"""
Domain: Item (stock-keeping unit).

Rules implemented here:
- stock is an integer and never negative; violations raise InvalidStockError.
- cost_price, selling_price and reorder_level are never negative.
- An item is low-stock iff stock <= reorder_level, and out of stock iff stock == 0.
- SKUs are generated once at creation time and never change.

This module contains only pure domain entities/value objects: no I/O, no database, no frameworks.
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from .errors import InvalidStockError
from .time import require_utc_timestamp, utcnow

# Prices are kept to the currency's minor unit.
MINOR_UNIT = Decimal("0.01")

_SKU_ALPHABET = string.ascii_uppercase + string.digits


def to_money(value: Any, *, name: str = "amount") -> Decimal:
    """Convert a number or numeric string to a Decimal quantized to the minor unit."""

    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"{name} must be a finite number")
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def generate_sku(now: Optional[datetime] = None) -> str:
    """Generate a unique-enough SKU: ``SKU-<epoch millis>-<6 base36 chars>``."""

    moment = now or utcnow()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(random.choices(_SKU_ALPHABET, k=6))
    return f"SKU-{millis}-{suffix}"


def _require_stock(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStockError(f"stock must be an integer, got {value!r}")
    if value < 0:
        raise InvalidStockError(f"stock must be >= 0, got {value}")


def _require_reorder_level(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"reorder_level must be an integer, got {value!r}")
    if value < 0:
        raise ValueError("reorder_level must be >= 0")


@dataclass(frozen=True, slots=True)
class ItemDetails:
    """
    The administrator-editable fields of an item.

    Submitted when adding or editing an item; the identity fields (item_id, sku,
    created_at) are assigned by the engine, never by the caller.
    """

    name: str
    description: str
    brand: str
    stock: int
    cost_price: Decimal
    selling_price: Decimal
    reorder_level: int

    def __post_init__(self) -> None:
        for field_name in ("name", "description", "brand"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{field_name} is required")
        _require_stock(self.stock)
        object.__setattr__(self, "cost_price", to_money(self.cost_price, name="cost_price"))
        object.__setattr__(self, "selling_price", to_money(self.selling_price, name="selling_price"))
        if self.cost_price < 0:
            raise ValueError("cost_price must be >= 0")
        if self.selling_price < 0:
            raise ValueError("selling_price must be >= 0")
        _require_reorder_level(self.reorder_level)


@dataclass(frozen=True, slots=True)
class Item:
    """
    Immutable snapshot of a stock-keeping unit.

    Mutations (edits, restocks, sales) produce a new instance; the catalog swaps
    the old snapshot for the new one.
    """

    item_id: str
    sku: str
    name: str
    description: str
    brand: str
    stock: int
    cost_price: Decimal
    selling_price: Decimal
    reorder_level: int
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.item_id:
            raise ValueError("item_id is required")
        if not self.sku:
            raise ValueError("sku is required")
        _require_stock(self.stock)
        object.__setattr__(self, "cost_price", to_money(self.cost_price, name="cost_price"))
        object.__setattr__(self, "selling_price", to_money(self.selling_price, name="selling_price"))
        if self.cost_price < 0:
            raise ValueError("cost_price must be >= 0")
        if self.selling_price < 0:
            raise ValueError("selling_price must be >= 0")
        _require_reorder_level(self.reorder_level)
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    @staticmethod
    def create(item_id: str, details: ItemDetails, *, created_at: datetime, sku: Optional[str] = None) -> "Item":
        return Item(
            item_id=item_id,
            sku=sku or generate_sku(created_at),
            name=details.name,
            description=details.description,
            brand=details.brand,
            stock=details.stock,
            cost_price=details.cost_price,
            selling_price=details.selling_price,
            reorder_level=details.reorder_level,
            created_at=created_at,
        )

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.reorder_level

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    @property
    def capital(self) -> Decimal:
        """Value of the units on hand at cost."""

        return self.cost_price * self.stock

    def with_stock(self, stock: int) -> "Item":
        """Return a copy holding ``stock`` units (validated by __post_init__)."""

        return replace(self, stock=stock)

    def with_details(self, details: ItemDetails) -> "Item":
        """
        Return a copy carrying the edited descriptive and pricing fields.

        Stock is left untouched; stock changes go through a WriteSet.
        """

        return replace(
            self,
            name=details.name,
            description=details.description,
            brand=details.brand,
            cost_price=details.cost_price,
            selling_price=details.selling_price,
            reorder_level=details.reorder_level,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive match on name, SKU or brand."""

        needle = query.strip().lower()
        if not needle:
            return True
        return (
            needle in self.name.lower()
            or needle in self.sku.lower()
            or needle in self.brand.lower()
        )
