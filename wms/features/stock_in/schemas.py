"""Pydantic schemas for stock-in requests and processing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wms.features.stock_in.models import StockInStatus


class StockInCreate(BaseModel):
    """Request to receive boxes of a product."""

    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    boxes: int = Field(..., gt=0, le=10_000, description="Number of boxes announced")
    source: str | None = Field(None, max_length=200, description="Supplier or origin")
    notes: str | None = Field(None, max_length=2000)


class StockInReject(BaseModel):
    """Rejection with mandatory reason."""

    reason: str = Field(..., min_length=1, max_length=2000)


class StockInResponse(BaseModel):
    """Stock-in request details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    boxes: int
    source: str | None = None
    notes: str | None = None
    status: StockInStatus
    submitted_by: int
    processed_by: int | None = None
    rejection_reason: str | None = None
    error_message: str | None = None
    processing_started_at: datetime | None = None
    processing_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Processing
# =============================================================================


class BoxInput(BaseModel):
    """Explicitly scanned/printed box."""

    model_config = ConfigDict(extra="forbid")

    barcode: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9-]+$")
    quantity: int = Field(..., gt=0)
    color: str | None = Field(None, max_length=50)
    size: str | None = Field(None, max_length=50)


class BatchInput(BaseModel):
    """One batch of boxes stored at a single location.

    Either give ``boxes`` explicitly, or give ``quantity_per_box`` (and
    optionally ``box_count`` / ``base_barcode``) to have box barcodes
    generated.
    """

    model_config = ConfigDict(extra="forbid")

    warehouse_id: int = Field(..., ge=1)
    location_id: int = Field(..., ge=1)
    box_count: int | None = Field(None, gt=0)
    quantity_per_box: int | None = Field(None, gt=0)
    color: str | None = Field(None, max_length=50)
    size: str | None = Field(None, max_length=50)
    base_barcode: str | None = Field(None, min_length=1, max_length=50)
    boxes: list[BoxInput] | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def check_box_source(self) -> "BatchInput":
        """Generated and explicit boxes are mutually exclusive."""
        if self.boxes is not None:
            if self.base_barcode is not None or self.quantity_per_box is not None:
                raise ValueError(
                    "Provide either explicit boxes or quantity_per_box/base_barcode, not both"
                )
            if self.box_count is not None and self.box_count != len(self.boxes):
                raise ValueError("box_count does not match the number of boxes given")
        elif self.quantity_per_box is None:
            raise ValueError("quantity_per_box is required when boxes are not listed")
        return self


class StockInProcessRequest(BaseModel):
    """Batches to create while processing an approved stock-in."""

    model_config = ConfigDict(extra="forbid")

    batches: list[BatchInput] = Field(..., min_length=1, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class ProcessedBatchSummary(BaseModel):
    """Batch created by processing."""

    id: int
    batch_number: str
    warehouse_id: int
    location_id: int
    total_boxes: int
    total_quantity: int
    barcodes: list[str]


class StockInProcessResponse(BaseModel):
    """Outcome of processing a stock-in."""

    stock_in: StockInResponse
    batches: list[ProcessedBatchSummary]
    total_boxes: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
