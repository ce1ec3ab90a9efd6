"""
Seed demo items and a demo sale for testing and demos.

Seeds the namespace of the given user (default: "anonymous") in the configured
APP_ID. Collections that already hold documents are left alone.

Usage:
    python scripts/seed_demo_data.py [user_id]
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import from repositories
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

from repositories.client import build_document_store, load_settings
from repositories.document_store import Namespace
from services.seed_service import seed_demo_data


def main(user_id: str = "anonymous"):
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)

    store = build_document_store(settings)
    namespace = Namespace(app_id=settings.app_id, user_id=user_id)

    result = seed_demo_data(store, namespace)

    if not result.seeded:
        print(f"Demo data already present in {namespace.root}, nothing to do")
        return

    print(f"[SUCCESS] Seeded {namespace.root}")
    for item in result.items_created:
        print(f"  Item: {item.name} ({item.sku}) stock={item.stock}")
    if result.sale_created is not None:
        sale = result.sale_created
        print(f"  Sale: {sale.sale_id} for {sale.customer.name}, total {sale.total_amount}")


if __name__ == "__main__":
    main(*sys.argv[1:2])
