"""Pydantic schemas for inventory, scanning, the ledger and transfers."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wms.features.inventory.models import (
    InventoryStatus,
    MovementStatus,
    MovementType,
    TransferStatus,
)


class InventoryItemResponse(BaseModel):
    """A box on hand."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    warehouse_id: int
    location_id: int
    batch_id: int | None = None
    barcode: str
    quantity: int
    color: str | None = None
    size: str | None = None
    status: InventoryStatus
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Barcode scan
# =============================================================================


class ScanRequest(BaseModel):
    """Barcode read by a handheld or camera scanner."""

    barcode: str = Field(..., min_length=1, max_length=64)

    @field_validator("barcode")
    @classmethod
    def strip_barcode(cls, v: str) -> str:
        """Scanners often append whitespace or a newline."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("barcode must not be blank")
        return stripped


class ScannedProduct(BaseModel):
    id: int
    name: str
    sku: str | None = None
    description: str | None = None


class ScannedLocation(BaseModel):
    warehouse_id: int
    warehouse: str
    location_id: int
    floor: int
    zone: str
    display_name: str


class ScanHistoryEntry(BaseModel):
    action: str
    movement_type: MovementType
    quantity: int
    timestamp: datetime
    user: str | None = None


class ScanResult(BaseModel):
    """Box details returned by a scan.

    ``total_product_quantity`` is omitted for field operators, whose history
    is limited to the most recent entry.
    """

    id: int
    barcode: str
    product: ScannedProduct
    box_quantity: int
    total_product_quantity: int | None = None
    status: InventoryStatus
    attributes: dict[str, str | None]
    location: ScannedLocation
    batch_id: int | None = None
    batch_number: str | None = None
    history: list[ScanHistoryEntry]


# =============================================================================
# Ledger
# =============================================================================


class MovementResponse(BaseModel):
    """Inventory ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    warehouse_id: int
    location_id: int
    inventory_id: int | None = None
    movement_type: MovementType
    quantity: int
    status: MovementStatus
    reference_table: str | None = None
    reference_id: str | None = None
    performed_by: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class MovementFilters(BaseModel):
    """Ledger query filters."""

    product_id: int | None = None
    warehouse_id: int | None = None
    location_id: int | None = None
    movement_type: MovementType | None = None
    status: MovementStatus | None = None
    date_from: date | None = None
    date_to: date | None = None
    reference_table: str | None = None
    reference_id: str | None = None
    performed_by: int | None = None


class StockLevel(BaseModel):
    """Ledger balance of a product at a location."""

    product_id: int
    product_name: str
    warehouse_id: int
    warehouse_name: str
    location_id: int
    location_name: str
    quantity: int = Field(..., gt=0)


# =============================================================================
# Adjustments
# =============================================================================


ADJUSTABLE_STATUSES = {
    InventoryStatus.AVAILABLE,
    InventoryStatus.RESERVED,
    InventoryStatus.DAMAGED,
}


class AdjustmentRequest(BaseModel):
    """Correct a box quantity and/or mark it (e.g. damaged)."""

    model_config = ConfigDict(extra="forbid")

    quantity: int | None = Field(None, ge=0)
    status: InventoryStatus | None = None
    reason: str = Field(..., min_length=1, max_length=500)

    @model_validator(mode="after")
    def check_change(self) -> "AdjustmentRequest":
        if self.quantity is None and self.status is None:
            raise ValueError("Provide a new quantity, a new status, or both")
        if self.status is not None and self.status not in ADJUSTABLE_STATUSES:
            raise ValueError(
                "status can only be adjusted to available, reserved or damaged"
            )
        return self


# =============================================================================
# Transfers
# =============================================================================


class TransferCreate(BaseModel):
    """Move scanned boxes of a product to another location."""

    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    source_warehouse_id: int = Field(..., ge=1)
    source_location_id: int = Field(..., ge=1)
    destination_warehouse_id: int = Field(..., ge=1)
    destination_location_id: int = Field(..., ge=1)
    barcodes: list[str] = Field(..., min_length=1, max_length=500)
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_locations(self) -> "TransferCreate":
        if self.source_location_id == self.destination_location_id:
            raise ValueError("Source and destination locations must differ")
        return self


class TransferReject(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


class TransferResponse(BaseModel):
    """Transfer request details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    source_warehouse_id: int
    source_location_id: int
    destination_warehouse_id: int
    destination_location_id: int
    quantity: int
    status: TransferStatus
    notes: str | None = None
    rejection_reason: str | None = None
    initiated_by: int
    approved_by: int | None = None
    barcodes: list[str]
    created_at: datetime
    updated_at: datetime
