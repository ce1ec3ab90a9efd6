"""
Transaction orchestrator for catalog mutations, restocks and sales.

Every mutating operation runs the same sequence:

    IDLE -> VALIDATING -> COMMITTING -> COMMITTED
                       -> REJECTED              (authorization or validation error)
                          COMMITTING -> FAILED  (document store error while writing)

and returns to IDLE once the transaction is over.

Validating:
- Administrator rights are checked first; without them the transaction is
  rejected with UnauthorizedError before the store or the catalog is touched.
- The freshest catalog snapshot is re-read from the store and the relevant stock
  plan is built against it (optimistic check, no locks).

Committing:
- Stock changes are written one document per item, then the sale record (sales
  only), then the activity log entry.
- A store failure surfaces as TransactionFailedError. Nothing is rolled back;
  the error lists the items whose stock write had already been applied.
- On success the cart used for the transaction is cleared.

The orchestrator is single-threaded: one transaction runs at a time per instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Tuple, TypeVar
from uuid import uuid4

from domain import activity
from domain.access import AccessContext
from domain.cart import Cart, PurchaseEntry, RestockEntry
from domain.catalog import ItemCatalog
from domain.errors import InventoryError, TransactionFailedError
from domain.item import Item, ItemDetails, generate_sku
from domain.sale import CustomerContact, Receipt, SaleLine, SaleRecord
from domain.stock import StockChange, WriteSet, plan_adjustment, plan_restock, plan_sale
from domain.time import utcnow
from repositories.activity_repository import append_activity
from repositories.document_store import DocumentStore, Namespace, StoreError
from repositories.item_repository import delete_item, load_catalog, save_item, write_stock
from repositories.sale_repository import record_sale

logger = logging.getLogger(__name__)

PlanT = TypeVar("PlanT")
ResultT = TypeVar("ResultT")


class TransactionState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    COMMITTING = "COMMITTING"
    COMMITTED = "COMMITTED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class RestockSummary:
    """Result of a committed restock: what was added and the resulting stock."""

    entries: Tuple[RestockEntry, ...]
    changes: Tuple[StockChange, ...]
    restocked_at: datetime
    activity_id: str

    @property
    def units_added(self) -> int:
        return sum(change.delta for change in self.changes)


def _new_id() -> str:
    return str(uuid4())


class TransactionOrchestrator:
    """
    Sequences add/edit/remove item, restock and sale transactions for one namespace.

    ``catalog`` mirrors the items collection as of the last transaction; it is
    refreshed from the store at the start of every transaction.
    """

    def __init__(
        self,
        store: DocumentStore,
        namespace: Namespace,
        *,
        currency: str = "PHP",
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._namespace = namespace
        self._currency = currency
        self._clock = clock
        self._new_id = id_factory
        self._catalog = ItemCatalog()
        self._state = TransactionState.IDLE
        self._transitions: List[TransactionState] = []

    @property
    def namespace(self) -> Namespace:
        return self._namespace

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def last_transitions(self) -> Tuple[TransactionState, ...]:
        """States visited by the most recent transaction, in order."""

        return tuple(self._transitions)

    def refresh_catalog(self) -> ItemCatalog:
        """Replace the local catalog with the freshest snapshot from the store."""

        self._catalog = load_catalog(self._store, self._namespace)
        return self._catalog

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add_item(self, access: AccessContext, details: ItemDetails) -> Item:
        def validate(catalog: ItemCatalog) -> Item:
            now = self._clock()
            taken = {item.sku for item in catalog.snapshot()}
            sku = generate_sku(now)
            while sku in taken:
                sku = generate_sku(now)
            return Item.create(self._new_id(), details, created_at=now, sku=sku)

        def commit(item: Item, applied: List[str]) -> Item:
            save_item(self._store, self._namespace, item)
            applied.append(item.item_id)
            self._log_activity(activity.item_added(self._new_id(), item, at=self._clock()))
            self._catalog.upsert(item)
            return item

        return self._run("add items", access, validate, commit)

    def edit_item(self, access: AccessContext, item_id: str, details: ItemDetails) -> Item:
        def validate(catalog: ItemCatalog) -> Tuple[Item, Item, WriteSet]:
            before = catalog.get(item_id)
            write_set = plan_adjustment(item_id, details.stock, catalog)
            return before, before.with_details(details), write_set

        def commit(plan: Tuple[Item, Item, WriteSet], applied: List[str]) -> Item:
            before, edited, write_set = plan
            after = edited.with_stock(write_set.new_stock(item_id)) if write_set else edited
            save_item(self._store, self._namespace, after)
            applied.append(item_id)
            self._log_activity(activity.item_updated(self._new_id(), before, after, at=self._clock()))
            self._catalog.upsert(edited)
            self._catalog.apply(write_set)
            return after

        return self._run("edit items", access, validate, commit)

    def remove_item(self, access: AccessContext, item_id: str) -> Item:
        def validate(catalog: ItemCatalog) -> Item:
            return catalog.get(item_id)

        def commit(item: Item, applied: List[str]) -> Item:
            delete_item(self._store, self._namespace, item_id)
            applied.append(item_id)
            self._log_activity(activity.item_removed(self._new_id(), item, at=self._clock()))
            self._catalog.remove(item_id)
            return item

        return self._run("remove items", access, validate, commit)

    def restock(self, access: AccessContext, cart: Cart[RestockEntry]) -> RestockSummary:
        def validate(catalog: ItemCatalog) -> Tuple[WriteSet, ItemCatalog]:
            return plan_restock(cart, catalog), catalog

        def commit(plan: Tuple[WriteSet, ItemCatalog], applied: List[str]) -> RestockSummary:
            write_set, catalog = plan
            self._apply_stock(write_set, catalog, applied)
            now = self._clock()
            entry = activity.stock_updated(self._new_id(), cart.entries(), at=now)
            self._log_activity(entry)
            summary = RestockSummary(
                entries=cart.entries(),
                changes=write_set.changes,
                restocked_at=now,
                activity_id=entry.entry_id,
            )
            cart.clear()
            return summary

        return self._run("restock items", access, validate, commit)

    def sell(self, access: AccessContext, cart: Cart[PurchaseEntry], customer: CustomerContact) -> Receipt:
        def validate(catalog: ItemCatalog) -> Tuple[WriteSet, ItemCatalog]:
            return plan_sale(cart, catalog), catalog

        def commit(plan: Tuple[WriteSet, ItemCatalog], applied: List[str]) -> Receipt:
            write_set, catalog = plan
            now = self._clock()
            lines = [SaleLine.for_item(catalog.get(entry.item_id), entry.quantity) for entry in cart.entries()]
            sale = SaleRecord.from_lines(self._new_id(), customer, lines, sold_at=now)

            self._apply_stock(write_set, catalog, applied)
            record_sale(self._store, self._namespace, sale)
            self._log_activity(activity.sale_completed(self._new_id(), sale, at=now, currency=self._currency))

            cart.clear()
            return Receipt.for_sale(sale, currency=self._currency)

        return self._run("record sales", access, validate, commit)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(
        self,
        action: str,
        access: AccessContext,
        validate: Callable[[ItemCatalog], PlanT],
        commit: Callable[[PlanT, List[str]], ResultT],
    ) -> ResultT:
        log_context = {"action": action, "user_id": access.user_id, "namespace": self._namespace.root}
        self._transitions = []
        self._enter(TransactionState.VALIDATING)
        try:
            try:
                access.require_admin(action)
                plan = validate(self.refresh_catalog())
            except InventoryError as e:
                self._enter(TransactionState.REJECTED)
                logger.info("Transaction rejected: %s", e, extra={**log_context, "error_code": e.code})
                raise
            except StoreError as e:
                self._enter(TransactionState.REJECTED)
                logger.error("Could not read the catalog to %s", action, extra=log_context)
                raise TransactionFailedError(f"Failed to read the catalog: {e}") from e

            self._enter(TransactionState.COMMITTING)
            applied: List[str] = []
            try:
                result = commit(plan, applied)
            except StoreError as e:
                self._enter(TransactionState.FAILED)
                logger.exception("Transaction failed while committing", extra={**log_context, "applied": applied})
                raise TransactionFailedError(
                    f"Failed to {action}: {e}. Re-check the affected records; no rollback was performed.",
                    applied,
                ) from e

            self._enter(TransactionState.COMMITTED)
            logger.info("Transaction committed", extra={**log_context, "written": applied})
            return result
        finally:
            self._state = TransactionState.IDLE

    def _enter(self, state: TransactionState) -> None:
        self._state = state
        self._transitions.append(state)

    def _apply_stock(self, write_set: WriteSet, catalog: ItemCatalog, applied: List[str]) -> None:
        for change in write_set:
            write_stock(self._store, self._namespace, catalog.get(change.item_id), change)
            applied.append(change.item_id)
        self._catalog.apply(write_set)

    def _log_activity(self, entry: activity.ActivityLogEntry) -> None:
        append_activity(self._store, self._namespace, entry)
