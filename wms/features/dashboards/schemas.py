"""Pydantic schemas for role dashboards and reports."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from wms.features.batches.schemas import BatchResponse
from wms.features.inquiries.schemas import InquiryResponse
from wms.features.inventory.schemas import MovementResponse
from wms.features.stock_in.schemas import StockInResponse


class ReportFormat(str, Enum):
    """Report output format."""

    JSON = "json"
    CSV = "csv"


# =============================================================================
# Dashboards
# =============================================================================


class AdminDashboard(BaseModel):
    """System-wide totals for administrators."""

    total_products: int = Field(..., ge=0, description="Active products")
    total_warehouses: int = Field(..., ge=0)
    active_profiles: int = Field(..., ge=0)
    inventory_boxes: int = Field(..., ge=0, description="Boxes available or reserved")
    inventory_units: int = Field(..., ge=0, description="Units in those boxes")
    pending_stock_ins: int = Field(..., ge=0)
    pending_stock_outs: int = Field(..., ge=0)
    open_inquiries: int = Field(..., ge=0, description="Inquiries new or in progress")
    recent_movements: list[MovementResponse]


class ManagerDashboard(BaseModel):
    """Work queue of a warehouse manager."""

    pending_stock_ins: int = Field(..., ge=0)
    approved_stock_ins: int = Field(..., ge=0)
    processing_stock_ins: int = Field(..., ge=0)
    pending_stock_outs: int = Field(..., ge=0)
    pending_transfers: int = Field(..., ge=0)
    recent_batches: list[BatchResponse]


class OperatorDashboard(BaseModel):
    """A field operator's own submissions."""

    stock_ins_by_status: dict[str, int]
    transfers_by_status: dict[str, int]
    recent_stock_ins: list[StockInResponse]


class SalesDashboard(BaseModel):
    inquiries_by_status: dict[str, int]
    orders_by_status: dict[str, int]
    order_value: Decimal = Field(..., description="Total value of orders not cancelled")


class CustomerDashboard(BaseModel):
    inquiries_by_status: dict[str, int]
    recent_inquiries: list[InquiryResponse]


# =============================================================================
# Reports
# =============================================================================


class InventoryStatusRow(BaseModel):
    """In-stock totals of one active product."""

    product_id: int
    product_name: str
    sku: str | None = None
    category: str | None = None
    boxes: int
    total_units: int
    low_stock: bool = Field(..., description="total_units below the low-stock threshold")


class MovementReportRow(BaseModel):
    """Ledger totals of one movement type on one day."""

    day: date
    movement_type: str
    movement_count: int
    total_quantity: int


class BatchTrackingRow(BaseModel):
    """Where the units of a batch went."""

    batch_id: int
    batch_number: str
    product_id: int
    product_name: str
    processed_at: datetime
    boxes: int
    original_quantity: int
    remaining_quantity: int
    sold_quantity: int
