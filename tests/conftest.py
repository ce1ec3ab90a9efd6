"""
Pytest configuration and shared fixtures.

This file adds the parent directory to the Python path so that tests
can import from the domain, repositories, services and api packages.
"""

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.access import AccessContext  # noqa: E402
from domain.item import Item, ItemDetails  # noqa: E402
from repositories.document_store import InMemoryDocumentStore, Namespace  # noqa: E402
from repositories.item_repository import save_item  # noqa: E402
from services.transaction_service import TransactionOrchestrator  # noqa: E402

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_details(
    name: str = "Oil Filter",
    *,
    stock: int = 10,
    cost_price: str = "150",
    selling_price: str = "250",
    reorder_level: int = 5,
    brand: str = "MotoParts",
) -> ItemDetails:
    return ItemDetails(
        name=name,
        description=f"{name} description",
        brand=brand,
        stock=stock,
        cost_price=Decimal(cost_price),
        selling_price=Decimal(selling_price),
        reorder_level=reorder_level,
    )


def make_item(item_id: str = "item-a", name: str = "Oil Filter", **kwargs) -> Item:
    sku = kwargs.pop("sku", f"SKU-{item_id.upper()}")
    return Item.create(item_id, make_details(name, **kwargs), created_at=T0, sku=sku)


class StepClock:
    """Deterministic clock: every call advances one second."""

    def __init__(self, start: datetime = T0) -> None:
        self._now = start

    def __call__(self) -> datetime:
        current = self._now
        self._now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def namespace() -> Namespace:
    return Namespace(app_id="test-app", user_id="user-1")


@pytest.fixture
def admin() -> AccessContext:
    return AccessContext.administrator("user-1")


@pytest.fixture
def viewer() -> AccessContext:
    return AccessContext.viewer("user-1")


@pytest.fixture
def orchestrator(store, namespace) -> TransactionOrchestrator:
    ids = count(1)
    return TransactionOrchestrator(
        store,
        namespace,
        clock=StepClock(),
        id_factory=lambda: f"id-{next(ids)}",
    )


@pytest.fixture
def seed_items(store, namespace):
    """Write items straight into the store and return them."""

    def _seed(*items: Item):
        for item in items:
            save_item(store, namespace, item)
        return items

    return _seed
