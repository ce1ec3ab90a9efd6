"""
Domain: Sale records and receipts.

Rules implemented here:
- A SaleRecord is immutable once created (append-only history).
- Each line carries the name, SKU and unit price at the time of sale, so past
  sales never change when the catalog is edited later.
- Customer name, address and phone are required; email is optional.
- total_amount equals the sum of the line totals.

All timestamps must be passed explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .item import MINOR_UNIT, Item, to_money
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class CustomerContact:
    name: str
    address: str
    phone: str
    email: Optional[str] = None

    def __post_init__(self) -> None:
        for field_name in ("name", "address", "phone"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Customer {field_name} is required")
        if self.email is not None and not self.email.strip():
            object.__setattr__(self, "email", None)


@dataclass(frozen=True, slots=True)
class SaleLine:
    item_id: str
    name: str
    sku: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("quantity must be > 0")
        object.__setattr__(self, "unit_price", to_money(self.unit_price, name="unit_price"))
        object.__setattr__(self, "line_total", to_money(self.line_total, name="line_total"))

    @staticmethod
    def for_item(item: Item, quantity: int) -> "SaleLine":
        """Price a line from the catalog snapshot the sale was validated against."""

        return SaleLine(
            item_id=item.item_id,
            name=item.name,
            sku=item.sku,
            quantity=quantity,
            unit_price=item.selling_price,
            line_total=(item.selling_price * quantity).quantize(MINOR_UNIT),
        )


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a committed sale.

    Captures:
    - Who bought (customer)
    - What was sold, at which price (lines)
    - How much was charged (total_amount)
    - When it was sold (sold_at)
    """

    sale_id: str
    customer: CustomerContact
    lines: Tuple[SaleLine, ...]
    total_amount: Decimal
    sold_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("sold_at", self.sold_at)
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "total_amount", to_money(self.total_amount, name="total_amount"))

    @staticmethod
    def from_lines(
        sale_id: str,
        customer: CustomerContact,
        lines: Iterable[SaleLine],
        *,
        sold_at: datetime,
    ) -> "SaleRecord":
        lines = tuple(lines)
        if not lines:
            raise ValueError("A sale needs at least one line")
        total = sum((line.line_total for line in lines), Decimal("0")).quantize(MINOR_UNIT)
        return SaleRecord(sale_id=sale_id, customer=customer, lines=lines, total_amount=total, sold_at=sold_at)

    @property
    def units_sold(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True, slots=True)
class Receipt:
    """Denormalized projection of a sale used for display and printing."""

    sale_id: str
    customer: CustomerContact
    lines: Tuple[SaleLine, ...]
    total_amount: Decimal
    issued_at: datetime
    currency: str

    @staticmethod
    def for_sale(sale: SaleRecord, *, currency: str) -> "Receipt":
        return Receipt(
            sale_id=sale.sale_id,
            customer=sale.customer,
            lines=sale.lines,
            total_amount=sale.total_amount,
            issued_at=sale.sold_at,
            currency=currency,
        )
