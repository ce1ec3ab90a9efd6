"""
Shared FastAPI dependencies.

- Settings and the document store are built once per process.
- The caller's namespace comes from the X-User-Id header.
- Administrator rights come from the X-Admin-Token header, compared against the
  ADMIN_TOKEN setting. Without a configured token nobody is an administrator.
"""

from __future__ import annotations

import hmac
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException

from domain.access import AccessContext
from domain.errors import (
    InsufficientStockError,
    InvalidQuantityError,
    InvalidStockError,
    InventoryError,
    NotFoundError,
    StaleReferenceError,
    TransactionFailedError,
    UnauthorizedError,
)
from repositories.client import Settings, build_document_store, load_settings
from repositories.document_store import DocumentStore, Namespace
from services.transaction_service import TransactionOrchestrator

_STATUS_BY_ERROR = (
    (InvalidQuantityError, 400),
    (InvalidStockError, 400),
    (UnauthorizedError, 403),
    (NotFoundError, 404),
    (StaleReferenceError, 404),
    (InsufficientStockError, 409),
    (TransactionFailedError, 502),
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_store() -> DocumentStore:
    return build_document_store(get_settings())


def get_namespace(
    x_user_id: str = Header("anonymous"),
    settings: Settings = Depends(get_settings),
) -> Namespace:
    try:
        return Namespace(app_id=settings.app_id, user_id=x_user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": "INVALID_INPUT", "message": f"Invalid X-User-Id header: {e}"})


def get_access(
    x_user_id: str = Header("anonymous"),
    x_admin_token: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> AccessContext:
    is_admin = bool(
        settings.admin_token
        and x_admin_token
        and hmac.compare_digest(x_admin_token, settings.admin_token)
    )
    return AccessContext(user_id=x_user_id, is_admin=is_admin)


def get_orchestrator(
    store: DocumentStore = Depends(get_store),
    namespace: Namespace = Depends(get_namespace),
    settings: Settings = Depends(get_settings),
) -> TransactionOrchestrator:
    return TransactionOrchestrator(store, namespace, currency=settings.currency)


def to_http_exception(error: InventoryError) -> HTTPException:
    """Map a domain error onto an HTTP error with a machine-readable body."""

    status_code = 500
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            status_code = status
            break

    detail: dict = {"error": error.code, "message": str(error)}
    if isinstance(error, InsufficientStockError):
        detail.update(item_id=error.item_id, available=error.available, requested=error.requested)
    if isinstance(error, TransactionFailedError):
        detail["applied_item_ids"] = list(error.applied_item_ids)
    return HTTPException(status_code=status_code, detail=detail)
