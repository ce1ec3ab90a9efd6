"""
Item API Endpoints.

Browsing is open to every caller; adding, editing and removing items requires
administrator rights (X-Admin-Token).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_access, get_namespace, get_orchestrator, get_store, to_http_exception
from api.models import ErrorResponse, ItemListResponse, ItemPayload, ItemResponse
from domain.access import AccessContext
from domain.catalog import ItemCatalog
from domain.errors import InventoryError
from repositories.document_store import DocumentStore, Namespace
from repositories.item_repository import list_items
from services.dashboard_service import load_low_stock
from services.transaction_service import TransactionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.get(
    "/items",
    response_model=ItemListResponse,
    summary="List Items",
    description="List every item, optionally filtered by a search on name, SKU or brand."
)
def get_items(
    q: Optional[str] = Query(None, description="Case-insensitive search on name, SKU or brand"),
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    """
    **Example usage:**
    - All items: `GET /api/v1/items`
    - Search: `GET /api/v1/items?q=brake`
    """
    try:
        catalog = ItemCatalog(list_items(store, namespace))
        items = catalog.search(q) if q else list(catalog.snapshot())
        return ItemListResponse(
            items=[ItemResponse.from_item(item) for item in items],
            total_count=len(items),
        )
    except Exception as e:
        logger.exception("Failed to list items")
        raise HTTPException(status_code=500, detail=f"Failed to list items: {str(e)}")


@router.get(
    "/items/low-stock",
    response_model=ItemListResponse,
    summary="Low Stock Items",
    description="Items whose stock is at or below their reorder level."
)
def get_low_stock_items(
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    try:
        items = load_low_stock(store, namespace)
        return ItemListResponse(
            items=[ItemResponse.from_item(item) for item in items],
            total_count=len(items),
        )
    except Exception as e:
        logger.exception("Failed to load low-stock items")
        raise HTTPException(status_code=500, detail=f"Failed to load low-stock items: {str(e)}")


@router.get("/items/{item_id}", response_model=ItemResponse, responses=_ERRORS, summary="Get Item")
def get_item(
    item_id: str,
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    try:
        return ItemResponse.from_item(ItemCatalog(list_items(store, namespace)).get(item_id))
    except InventoryError as e:
        raise to_http_exception(e)


@router.post("/items", response_model=ItemResponse, status_code=201, responses=_ERRORS, summary="Add Item")
def add_item(
    payload: ItemPayload,
    access: AccessContext = Depends(get_access),
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    """Add a new item. A unique SKU is generated by the server."""
    try:
        access.require_admin("add items")
    except InventoryError as e:
        raise to_http_exception(e)

    try:
        details = payload.to_details()
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": "INVALID_INPUT", "message": str(e)})

    try:
        return ItemResponse.from_item(orchestrator.add_item(access, details))
    except InventoryError as e:
        raise to_http_exception(e)


@router.put("/items/{item_id}", response_model=ItemResponse, responses=_ERRORS, summary="Edit Item")
def edit_item(
    item_id: str,
    payload: ItemPayload,
    access: AccessContext = Depends(get_access),
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    try:
        access.require_admin("edit items")
    except InventoryError as e:
        raise to_http_exception(e)

    try:
        details = payload.to_details()
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": "INVALID_INPUT", "message": str(e)})

    try:
        return ItemResponse.from_item(orchestrator.edit_item(access, item_id, details))
    except InventoryError as e:
        raise to_http_exception(e)


@router.delete("/items/{item_id}", response_model=ItemResponse, responses=_ERRORS, summary="Remove Item")
def remove_item(
    item_id: str,
    access: AccessContext = Depends(get_access),
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    """Hard-delete an item. Removing an unknown item returns 404."""
    try:
        return ItemResponse.from_item(orchestrator.remove_item(access, item_id))
    except InventoryError as e:
        raise to_http_exception(e)
