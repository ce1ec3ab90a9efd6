"""
Item repository (persistence).

This module provides *only* persistence operations for the Item domain entity:
conversion between documents and Item objects, and the reads/writes against the
namespaced "items" collection. Stock rules live in domain/stock.py; this module
writes whatever stock value it is handed.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from domain.catalog import ItemCatalog
from domain.item import Item
from domain.stock import StockChange
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.document_store import ITEMS, DocumentStore, Namespace


def item_to_document(item: Item) -> dict[str, Any]:
    return {
        "sku": item.sku,
        "name": item.name,
        "description": item.description,
        "brand": item.brand,
        "stock": item.stock,
        "costPrice": str(item.cost_price),
        "sellingPrice": str(item.selling_price),
        "reorderLevel": item.reorder_level,
        "createdAt": to_iso_utc(item.created_at, name="created_at") if item.created_at else None,
    }


def document_to_item(doc: Mapping[str, Any]) -> Item:
    created_at = doc.get("createdAt")
    return Item(
        item_id=str(doc["id"]),
        sku=str(doc["sku"]),
        name=str(doc["name"]),
        description=str(doc.get("description", "")),
        brand=str(doc.get("brand", "")),
        stock=int(doc["stock"]),
        cost_price=doc["costPrice"],
        selling_price=doc["sellingPrice"],
        reorder_level=int(doc.get("reorderLevel", 0)),
        created_at=parse_utc_datetime(created_at) if created_at else None,
    )


def list_items(store: DocumentStore, namespace: Namespace) -> List[Item]:
    return [document_to_item(doc) for doc in store.read(namespace.collection(ITEMS))]


def load_catalog(store: DocumentStore, namespace: Namespace) -> ItemCatalog:
    """Read the freshest snapshot of the items collection into a catalog."""

    return ItemCatalog(list_items(store, namespace))


def get_item(store: DocumentStore, namespace: Namespace, item_id: str) -> Optional[Item]:
    for item in list_items(store, namespace):
        if item.item_id == item_id:
            return item
    return None


def save_item(store: DocumentStore, namespace: Namespace, item: Item) -> None:
    store.write(namespace.collection(ITEMS), item.item_id, item_to_document(item))


def write_stock(store: DocumentStore, namespace: Namespace, item: Item, change: StockChange) -> Item:
    """
    Persist one stock change from a WriteSet.

    ``item`` is the validated snapshot the change was planned against; the full
    document is rewritten with the new stock value.
    """

    updated = item.with_stock(change.new_stock)
    save_item(store, namespace, updated)
    return updated


def delete_item(store: DocumentStore, namespace: Namespace, item_id: str) -> None:
    store.delete(namespace.collection(ITEMS), item_id)


__all__ = [
    "delete_item",
    "document_to_item",
    "get_item",
    "item_to_document",
    "list_items",
    "load_catalog",
    "save_item",
    "write_stock",
]
