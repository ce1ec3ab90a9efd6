"""
Dashboard API Endpoints.

Summary metrics and the activity log. Both are read-only and open to every caller.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_namespace, get_store
from api.models import ActivityResponse, DashboardResponse, ItemResponse, SaleSummaryResponse
from repositories.document_store import DocumentStore, Namespace
from services.dashboard_service import load_activity, load_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard Summary")
def get_dashboard(
    recent: int = Query(10, ge=0, le=100, description="Number of recent sales to include"),
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    try:
        summary = load_dashboard(store, namespace, recent=recent)
    except Exception as e:
        logger.exception("Failed to load dashboard")
        raise HTTPException(status_code=500, detail=f"Failed to load dashboard: {str(e)}")

    inventory = summary.inventory
    return DashboardResponse(
        total_items=inventory.total_items,
        stock_out_items=inventory.stock_out_items,
        total_capital=inventory.total_capital,
        total_sales=summary.total_sales,
        sale_count=summary.sale_count,
        low_stock_count=inventory.low_stock_count,
        low_stock=[ItemResponse.from_item(item) for item in inventory.low_stock],
        recent_sales=[SaleSummaryResponse.from_sale(sale) for sale in summary.recent_sales],
    )


@router.get("/activity", response_model=list[ActivityResponse], summary="Activity Log")
def get_activity(
    limit: int = Query(50, ge=1, le=500),
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
):
    """Newest entries first. An unavailable log is returned as an empty list."""
    return [ActivityResponse.from_entry(entry) for entry in load_activity(store, namespace, limit=limit)]
