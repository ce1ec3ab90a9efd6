"""
Demo data seeding.

One-time setup routine, kept outside the transaction path: it writes directly
through the repositories and logs no activity. Each collection is seeded only
when it is empty, so running it again is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from domain.item import Item, ItemDetails
from domain.sale import CustomerContact, SaleLine, SaleRecord
from domain.time import utcnow
from repositories.document_store import ITEMS, SALES, DocumentStore, Namespace
from repositories.item_repository import save_item
from repositories.sale_repository import record_sale

logger = logging.getLogger(__name__)

DEMO_ITEMS = (
    ("demo-oil-filter", ItemDetails(
        name="Oil Filter (Dummy)",
        description="Standard oil filter for motorcycles",
        brand="MotoParts",
        stock=50,
        cost_price=Decimal("150"),
        selling_price=Decimal("250"),
        reorder_level=10,
    )),
    ("demo-spark-plug", ItemDetails(
        name="Spark Plug (Dummy)",
        description="High-performance spark plug",
        brand="NGK",
        stock=0,
        cost_price=Decimal("80"),
        selling_price=Decimal("120"),
        reorder_level=5,
    )),
    ("demo-brake-pad-set", ItemDetails(
        name="Brake Pad Set (Dummy)",
        description="Front brake pad set",
        brand="BrakePro",
        stock=25,
        cost_price=Decimal("400"),
        selling_price=Decimal("650"),
        reorder_level=20,
    )),
    ("demo-tire", ItemDetails(
        name="Tire (Dummy)",
        description="Motorcycle rear tire",
        brand="TireX",
        stock=8,
        cost_price=Decimal("1200"),
        selling_price=Decimal("1800"),
        reorder_level=10,
    )),
)

DEMO_SALE_ID = "demo-sale-1"


@dataclass(frozen=True, slots=True)
class SeedResult:
    items_created: List[Item]
    sale_created: Optional[SaleRecord]

    @property
    def seeded(self) -> bool:
        return bool(self.items_created) or self.sale_created is not None


def _demo_items(now: datetime) -> List[Item]:
    return [Item.create(item_id, details, created_at=now) for item_id, details in DEMO_ITEMS]


def _demo_sale(now: datetime) -> SaleRecord:
    oil_filter, _, brake_pads, _ = _demo_items(now)
    return SaleRecord.from_lines(
        DEMO_SALE_ID,
        CustomerContact(
            name="John Doe",
            address="123 Main St",
            phone="555-1234",
            email="john.doe@example.com",
        ),
        [SaleLine.for_item(oil_filter, 2), SaleLine.for_item(brake_pads, 1)],
        sold_at=now,
    )


def seed_demo_data(
    store: DocumentStore,
    namespace: Namespace,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> SeedResult:
    """
    Seed demo items and one demo sale into empty collections.

    Returns:
        SeedResult listing what was written (empty when nothing was needed)
    """

    now = clock()
    items_created: List[Item] = []
    sale_created: Optional[SaleRecord] = None

    if not store.read(namespace.collection(ITEMS)):
        logger.info("No items found, adding demo items", extra={"namespace": namespace.root})
        for item in _demo_items(now):
            save_item(store, namespace, item)
            items_created.append(item)

    if not store.read(namespace.collection(SALES)):
        logger.info("No sales found, adding demo sale", extra={"namespace": namespace.root})
        sale_created = record_sale(store, namespace, _demo_sale(now))

    return SeedResult(items_created=items_created, sale_created=sale_created)


__all__ = ["DEMO_ITEMS", "SeedResult", "seed_demo_data"]
