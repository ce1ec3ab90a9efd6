"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from domain.activity import ActivityLogEntry
from domain.item import Item, ItemDetails
from domain.sale import CustomerContact, Receipt, SaleLine, SaleRecord
from domain.stock import StockChange


# ============================================================================
# Item Models
# ============================================================================

class ItemPayload(BaseModel):
    """Fields submitted when adding or editing an item."""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    cost_price: Decimal = Field(..., ge=0)
    selling_price: Decimal = Field(..., ge=0)
    reorder_level: int = Field(..., ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Oil Filter",
                "description": "Standard oil filter for motorcycles",
                "brand": "MotoParts",
                "stock": 50,
                "cost_price": "150.00",
                "selling_price": "250.00",
                "reorder_level": 10
            }
        }

    def to_details(self) -> ItemDetails:
        return ItemDetails(
            name=self.name,
            description=self.description,
            brand=self.brand,
            stock=self.stock,
            cost_price=self.cost_price,
            selling_price=self.selling_price,
            reorder_level=self.reorder_level,
        )


class ItemResponse(BaseModel):
    """Single item in API response."""
    item_id: str
    sku: str
    name: str
    description: str
    brand: str
    stock: int
    cost_price: Decimal
    selling_price: Decimal
    reorder_level: int
    created_at: Optional[datetime] = None
    is_low_stock: bool
    is_out_of_stock: bool

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        return cls(
            item_id=item.item_id,
            sku=item.sku,
            name=item.name,
            description=item.description,
            brand=item.brand,
            stock=item.stock,
            cost_price=item.cost_price,
            selling_price=item.selling_price,
            reorder_level=item.reorder_level,
            created_at=item.created_at,
            is_low_stock=item.is_low_stock,
            is_out_of_stock=item.is_out_of_stock,
        )


class ItemListResponse(BaseModel):
    """Response for item listing."""
    items: List[ItemResponse]
    total_count: int


# ============================================================================
# Cart Models
# ============================================================================

class CartLine(BaseModel):
    """One cart line; repeated item ids are aggregated server-side."""
    item_id: str
    quantity: int


class RestockRequest(BaseModel):
    """Request to restock several items at once."""
    lines: List[CartLine] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "lines": [
                    {"item_id": "demo-tire", "quantity": 5},
                    {"item_id": "demo-tire", "quantity": 3}
                ]
            }
        }


class StockChangeResponse(BaseModel):
    item_id: str
    previous_stock: int
    new_stock: int

    @classmethod
    def from_change(cls, change: StockChange) -> "StockChangeResponse":
        return cls(item_id=change.item_id, previous_stock=change.previous_stock, new_stock=change.new_stock)


class RestockResponse(BaseModel):
    """Response after a committed restock."""
    changes: List[StockChangeResponse]
    units_added: int
    restocked_at: datetime
    activity_id: str


# ============================================================================
# Sale Models
# ============================================================================

class CustomerPayload(BaseModel):
    name: str
    address: str
    phone: str
    email: Optional[str] = None

    def to_contact(self) -> CustomerContact:
        return CustomerContact(name=self.name, address=self.address, phone=self.phone, email=self.email)


class SaleRequest(BaseModel):
    """Request to record a sale."""
    customer: CustomerPayload
    lines: List[CartLine] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "customer": {
                    "name": "John Doe",
                    "address": "123 Main St",
                    "phone": "555-1234",
                    "email": "john.doe@example.com"
                },
                "lines": [
                    {"item_id": "demo-oil-filter", "quantity": 2},
                    {"item_id": "demo-brake-pad-set", "quantity": 1}
                ]
            }
        }


class SaleLineResponse(BaseModel):
    item_id: str
    name: str
    sku: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_line(cls, line: SaleLine) -> "SaleLineResponse":
        return cls(
            item_id=line.item_id,
            name=line.name,
            sku=line.sku,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )


class ReceiptResponse(BaseModel):
    """Printable receipt for a committed sale."""
    sale_id: str
    customer: CustomerPayload
    lines: List[SaleLineResponse]
    total_amount: Decimal
    issued_at: datetime
    currency: str

    @classmethod
    def from_receipt(cls, receipt: Receipt) -> "ReceiptResponse":
        customer = receipt.customer
        return cls(
            sale_id=receipt.sale_id,
            customer=CustomerPayload(
                name=customer.name, address=customer.address, phone=customer.phone, email=customer.email
            ),
            lines=[SaleLineResponse.from_line(line) for line in receipt.lines],
            total_amount=receipt.total_amount,
            issued_at=receipt.issued_at,
            currency=receipt.currency,
        )


class SaleSummaryResponse(BaseModel):
    sale_id: str
    customer_name: str
    units_sold: int
    total_amount: Decimal
    sold_at: datetime

    @classmethod
    def from_sale(cls, sale: SaleRecord) -> "SaleSummaryResponse":
        return cls(
            sale_id=sale.sale_id,
            customer_name=sale.customer.name,
            units_sold=sale.units_sold,
            total_amount=sale.total_amount,
            sold_at=sale.sold_at,
        )


class SaleListResponse(BaseModel):
    sales: List[SaleSummaryResponse]
    total_count: int


# ============================================================================
# Dashboard Models
# ============================================================================

class DashboardResponse(BaseModel):
    """Summary numbers shown on the dashboard."""
    total_items: int
    stock_out_items: int
    total_capital: Decimal
    total_sales: Decimal
    sale_count: int
    low_stock_count: int
    low_stock: List[ItemResponse]
    recent_sales: List[SaleSummaryResponse]

    class Config:
        json_schema_extra = {
            "example": {
                "total_items": 4,
                "stock_out_items": 1,
                "total_capital": "27100.00",
                "total_sales": "1150.00",
                "sale_count": 1,
                "low_stock_count": 2,
                "low_stock": [],
                "recent_sales": []
            }
        }


class ActivityResponse(BaseModel):
    entry_id: str
    type: str
    description: str
    timestamp: datetime
    details: Dict[str, Any]

    @classmethod
    def from_entry(cls, entry: ActivityLogEntry) -> "ActivityResponse":
        return cls(
            entry_id=entry.entry_id,
            type=entry.type.value,
            description=entry.description,
            timestamp=entry.timestamp,
            details=dict(entry.details),
        )


# ============================================================================
# Error Models
# ============================================================================

class ErrorDetail(BaseModel):
    """Machine-readable body of a domain error."""
    error: str
    message: str
    item_id: Optional[str] = None
    available: Optional[int] = None
    requested: Optional[int] = None
    applied_item_ids: Optional[List[str]] = None


class ErrorResponse(BaseModel):
    """Error response returned for 400/403/404/409/502 domain errors."""
    detail: ErrorDetail

    class Config:
        json_schema_extra = {
            "example": {
                "detail": {
                    "error": "INSUFFICIENT_STOCK",
                    "message": "Not enough stock for Tire. Available: 0, Requested: 1",
                    "item_id": "demo-tire",
                    "available": 0,
                    "requested": 1
                }
            }
        }
