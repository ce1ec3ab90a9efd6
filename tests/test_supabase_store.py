"""
Tests for `repositories/supabase_store.py` against a fake Supabase client.

Covers contract rules:
- Documents are upserted per (collection, doc_id) and read back with their id.
- postgrest API errors surface as StoreError.
- Deleting a missing document raises StoreError.
- Subscribers are notified after writes and on refresh().
- A failed re-read for subscribers never fails a write that already landed.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

from conftest import make_item
from domain.cart import restock_cart
from repositories.document_store import ITEMS, StoreError
from repositories.item_repository import save_item
from repositories.supabase_store import SupabaseDocumentStore
from services.transaction_service import TransactionOrchestrator


class FakeQuery:
    def __init__(self, table: "FakeTable", op: str, payload=None) -> None:
        self._table = table
        self._op = op
        self._payload = payload
        self._filters = {}

    def select(self, _columns):
        return self

    def order(self, _column):
        return self

    def eq(self, column, value):
        self._filters[column] = value
        return self

    def execute(self):
        if self._table.fail or (self._op == "select" and self._table.fail_reads):
            raise APIError({"message": "boom", "code": "500"})
        rows = self._table.rows
        if self._op == "upsert":
            self._table.fail_reads = self._table.fail_reads_after_upsert
            key = (self._payload["collection"], self._payload["doc_id"])
            rows[key] = self._payload
            return SimpleNamespace(data=[self._payload])
        matched = [
            row for row in rows.values()
            if all(row[column] == value for column, value in self._filters.items())
        ]
        if self._op == "delete":
            for row in matched:
                del rows[(row["collection"], row["doc_id"])]
        return SimpleNamespace(data=matched)


class FakeTable:
    def __init__(self) -> None:
        self.rows = {}
        self.fail = False
        self.fail_reads = False
        self.fail_reads_after_upsert = False

    def select(self, columns):
        return FakeQuery(self, "select").select(columns)

    def upsert(self, payload, on_conflict):
        assert on_conflict == "collection,doc_id"
        return FakeQuery(self, "upsert", payload)

    def delete(self):
        return FakeQuery(self, "delete")


class FakeClient:
    def __init__(self) -> None:
        self.documents = FakeTable()

    def table(self, name):
        assert name == "documents"
        return self.documents


def test_write_then_read_round_trip() -> None:
    store = SupabaseDocumentStore(FakeClient())

    store.write("c", "a", {"id": "ignored", "n": 1})
    store.write("c", "a", {"n": 2})
    store.write("other", "b", {"n": 3})

    assert store.read("c") == [{"n": 2, "id": "a"}]


def test_api_error_becomes_store_error() -> None:
    client = FakeClient()
    client.documents.fail = True
    store = SupabaseDocumentStore(client)

    with pytest.raises(StoreError):
        store.read("c")
    with pytest.raises(StoreError):
        store.write("c", "a", {"n": 1})


def test_delete_missing_document_raises() -> None:
    store = SupabaseDocumentStore(FakeClient())
    store.write("c", "a", {"n": 1})

    store.delete("c", "a")
    assert store.read("c") == []

    with pytest.raises(StoreError):
        store.delete("c", "a")


def test_subscribers_notified_on_write_and_refresh() -> None:
    client = FakeClient()
    store = SupabaseDocumentStore(client)
    received = []
    store.subscribe("c", received.append)

    store.write("c", "a", {"n": 1})
    client.documents.rows[("c", "b")] = {"collection": "c", "doc_id": "b", "data": {"n": 2}}
    store.refresh("c")

    assert [len(docs) for docs in received] == [1, 2]


def test_failed_notification_read_does_not_fail_write() -> None:
    """Verify a write that landed is not reported as failed when the re-read for subscribers fails."""

    client = FakeClient()
    store = SupabaseDocumentStore(client)
    received = []
    store.subscribe("c", received.append)
    client.documents.fail_reads_after_upsert = True

    store.write("c", "a", {"n": 1})

    assert received == []
    assert ("c", "a") in client.documents.rows


def test_restock_commits_when_notification_read_fails(namespace, admin) -> None:
    """Verify a restock through the Supabase store commits even if subscribers cannot be refreshed."""

    client = FakeClient()
    store = SupabaseDocumentStore(client)
    save_item(store, namespace, make_item("item-a", stock=10))
    store.subscribe(namespace.collection(ITEMS), lambda docs: None)

    orchestrator = TransactionOrchestrator(store, namespace)
    catalog = orchestrator.refresh_catalog()
    cart = restock_cart()
    cart.add(catalog.get("item-a"), 5)
    client.documents.fail_reads_after_upsert = True

    summary = orchestrator.restock(admin, cart)

    assert summary.units_added == 5
    stored = client.documents.rows[(namespace.collection(ITEMS), "item-a")]
    assert stored["data"]["stock"] == 15
