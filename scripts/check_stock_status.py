"""
Check stock status - dashboard numbers and items that need reordering.

Usage:
    python scripts/check_stock_status.py [user_id]
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.client import build_document_store, load_settings
from repositories.document_store import Namespace
from services.dashboard_service import load_dashboard


def check_stock_status(user_id: str = "anonymous"):
    """Print the dashboard summary and the low-stock list."""

    settings = load_settings()
    store = build_document_store(settings)
    namespace = Namespace(app_id=settings.app_id, user_id=user_id)

    summary = load_dashboard(store, namespace)
    inventory = summary.inventory

    print("=" * 50)
    print("STOCK STATUS")
    print("=" * 50)
    print(f"Total items:               {inventory.total_items}")
    print(f"Out of stock:              {inventory.stock_out_items}")
    print(f"Total capital:             {settings.currency} {inventory.total_capital}")
    print(f"Total sales:               {settings.currency} {summary.total_sales} ({summary.sale_count} sales)")
    print("=" * 50)

    print(f"\nLow stock ({inventory.low_stock_count}):")
    print("-" * 50)
    for item in inventory.low_stock:
        print(f"{item.name} [{item.sku}]: {item.stock} left (reorder at {item.reorder_level})")
    print("-" * 50)


if __name__ == "__main__":
    check_stock_status(*sys.argv[1:2])
