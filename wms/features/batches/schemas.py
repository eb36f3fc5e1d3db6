"""Pydantic schemas for processed batches."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from wms.features.batches.models import BatchStatus
from wms.features.inventory.models import InventoryStatus


class BatchItemResponse(BaseModel):
    """One box of a batch."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    barcode: str
    quantity: int
    color: str | None = None
    size: str | None = None
    warehouse_id: int
    location_id: int
    status: InventoryStatus


class BatchResponse(BaseModel):
    """Batch header."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_number: str
    stock_in_id: int
    product_id: int
    warehouse_id: int
    location_id: int
    total_boxes: int
    total_quantity: int
    status: BatchStatus
    processed_by: int | None = None
    processed_at: datetime
    source: str | None = None
    notes: str | None = None
    created_at: datetime


class BatchDetailResponse(BatchResponse):
    """Batch with its boxes."""

    items: list[BatchItemResponse]


class BatchFilters(BaseModel):
    """Batch list filters."""

    product_id: int | None = None
    warehouse_id: int | None = None
    stock_in_id: int | None = None
    status: BatchStatus | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None
