"""
Sale repository (persistence).

This module provides *only* persistence operations for the SaleRecord domain
entity. It does not enforce business rules (e.g., sufficient stock); it only
appends and fetches sale records. Sale documents are never updated.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional

from domain.sale import CustomerContact, SaleLine, SaleRecord
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.document_store import SALES, DocumentStore, Namespace


def sale_to_document(sale: SaleRecord) -> dict[str, Any]:
    return {
        "customerName": sale.customer.name,
        "customerAddress": sale.customer.address,
        "customerContact": sale.customer.phone,
        "customerEmail": sale.customer.email,
        "items": [
            {
                "itemId": line.item_id,
                "itemName": line.name,
                "sku": line.sku,
                "quantitySold": line.quantity,
                "sellingPriceAtSale": str(line.unit_price),
                "total": str(line.line_total),
            }
            for line in sale.lines
        ],
        "totalAmount": str(sale.total_amount),
        "timestamp": to_iso_utc(sale.sold_at, name="sold_at"),
    }


def _document_to_line(row: Mapping[str, Any]) -> SaleLine:
    quantity = int(row["quantitySold"])
    unit_price = row["sellingPriceAtSale"]
    # Older documents carry no per-line total; derive it.
    line_total = row.get("total")
    if line_total is None:
        line_total = Decimal(str(unit_price)) * quantity
    return SaleLine(
        item_id=str(row["itemId"]),
        name=str(row.get("itemName", "")),
        sku=str(row.get("sku", "")),
        quantity=quantity,
        unit_price=unit_price,
        line_total=line_total,
    )


def document_to_sale(doc: Mapping[str, Any]) -> SaleRecord:
    email = doc.get("customerEmail")
    return SaleRecord(
        sale_id=str(doc["id"]),
        customer=CustomerContact(
            name=str(doc["customerName"]),
            address=str(doc["customerAddress"]),
            phone=str(doc["customerContact"]),
            email=None if email in (None, "", "N/A") else str(email),
        ),
        lines=tuple(_document_to_line(row) for row in doc.get("items", [])),
        total_amount=doc["totalAmount"],
        sold_at=parse_utc_datetime(doc["timestamp"]),
    )


def record_sale(store: DocumentStore, namespace: Namespace, sale: SaleRecord) -> SaleRecord:
    """Append a committed sale to the namespaced sales collection."""

    store.write(namespace.collection(SALES), sale.sale_id, sale_to_document(sale))
    return sale


def list_sales(store: DocumentStore, namespace: Namespace) -> List[SaleRecord]:
    """
    Retrieve all sale records, newest first.

    Returns:
        List[SaleRecord] (possibly empty)
    """

    sales = [document_to_sale(doc) for doc in store.read(namespace.collection(SALES))]
    return sorted(sales, key=lambda sale: sale.sold_at, reverse=True)


def get_sale_by_id(store: DocumentStore, namespace: Namespace, sale_id: str) -> Optional[SaleRecord]:
    """
    Retrieve a single sale record by its ID.

    Returns:
        SaleRecord or None if not found
    """

    for doc in store.read(namespace.collection(SALES)):
        if str(doc["id"]) == sale_id:
            return document_to_sale(doc)
    return None


__all__ = [
    "document_to_sale",
    "get_sale_by_id",
    "list_sales",
    "record_sale",
    "sale_to_document",
]
