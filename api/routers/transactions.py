"""
Restock and Sale API Endpoints.

Carts live on the client; each request submits the cart lines, which are
aggregated here through the same Cart logic the engine uses and then committed
in one transaction.
"""

import logging
from typing import Iterable, List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_access, get_namespace, get_orchestrator, get_settings, get_store, to_http_exception
from api.models import (
    CartLine,
    ErrorResponse,
    ReceiptResponse,
    RestockRequest,
    RestockResponse,
    SaleListResponse,
    SaleRequest,
    SaleSummaryResponse,
    StockChangeResponse,
)
from domain.access import AccessContext
from domain.cart import Cart, purchase_cart, restock_cart
from domain.errors import InventoryError, TransactionFailedError
from domain.sale import Receipt
from repositories.client import Settings
from repositories.document_store import DocumentStore, Namespace, StoreError
from repositories.sale_repository import get_sale_by_id, list_sales
from services.transaction_service import TransactionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _fill_cart(cart: Cart, lines: Iterable[CartLine], orchestrator: TransactionOrchestrator) -> Cart:
    """Aggregate the submitted lines against the freshest catalog. Callers check access first."""

    try:
        catalog = orchestrator.refresh_catalog()
    except StoreError as e:
        logger.error("Could not read the catalog", extra={"namespace": orchestrator.namespace.root})
        raise TransactionFailedError(f"Failed to read the catalog: {e}") from e

    for line in lines:
        cart.add(catalog.get(line.item_id), line.quantity)
    return cart


@router.post(
    "/restocks",
    response_model=RestockResponse,
    responses=_ERRORS,
    summary="Restock Items",
    description="Add stock to several items at once (administrator only)."
)
def restock_items(
    request: RestockRequest,
    access: AccessContext = Depends(get_access),
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    """
    **Example request:**
    ```json
    {"lines": [{"item_id": "demo-tire", "quantity": 5}, {"item_id": "demo-tire", "quantity": 3}]}
    ```
    Both lines are merged into a single +8 change for the item.
    """
    try:
        access.require_admin("restock items")
        cart = _fill_cart(restock_cart(), request.lines, orchestrator)
        summary = orchestrator.restock(access, cart)
    except InventoryError as e:
        raise to_http_exception(e)

    return RestockResponse(
        changes=[StockChangeResponse.from_change(change) for change in summary.changes],
        units_added=summary.units_added,
        restocked_at=summary.restocked_at,
        activity_id=summary.activity_id,
    )


@router.post(
    "/sales",
    response_model=ReceiptResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Record Sale",
    description="Sell the submitted cart to a customer. All-or-nothing: any short line rejects the whole sale."
)
def record_sale(
    request: SaleRequest,
    access: AccessContext = Depends(get_access),
    orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
):
    try:
        access.require_admin("record sales")
    except InventoryError as e:
        raise to_http_exception(e)

    try:
        customer = request.customer.to_contact()
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": "INVALID_INPUT", "message": str(e)})

    try:
        cart = _fill_cart(purchase_cart(), request.lines, orchestrator)
        receipt = orchestrator.sell(access, cart, customer)
    except InventoryError as e:
        raise to_http_exception(e)

    return ReceiptResponse.from_receipt(receipt)


@router.get("/sales", response_model=SaleListResponse, summary="Recent Sales")
def get_sales(
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    """All sales, newest first."""
    try:
        sales: List[SaleSummaryResponse] = [
            SaleSummaryResponse.from_sale(sale) for sale in list_sales(store, namespace)
        ]
        return SaleListResponse(sales=sales, total_count=len(sales))
    except Exception as e:
        logger.exception("Failed to list sales")
        raise HTTPException(status_code=500, detail=f"Failed to list sales: {str(e)}")


@router.get(
    "/sales/{sale_id}/receipt",
    response_model=ReceiptResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Sale Receipt"
)
def get_sale_receipt(
    sale_id: str,
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
    settings: Settings = Depends(get_settings),
):
    sale = get_sale_by_id(store, namespace, sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail={"error": "NOT_FOUND", "message": f"Sale not found: {sale_id}"})
    return ReceiptResponse.from_receipt(Receipt.for_sale(sale, currency=settings.currency))
