"""Pydantic schemas for stock-out requests and processing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wms.features.stock_out.models import StockOutStatus


class StockOutCreate(BaseModel):
    """Request to remove a quantity of a product."""

    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., gt=0)
    destination: str = Field(..., min_length=1, max_length=200)
    reason: str | None = Field(None, max_length=2000)
    invoice_number: str | None = Field(None, max_length=50)
    packing_slip_number: str | None = Field(None, max_length=50)
    reference_number: str | None = Field(None, max_length=50)


class StockOutApprove(BaseModel):
    """Approval, optionally for less than the requested quantity."""

    approved_quantity: int | None = Field(None, gt=0)


class StockOutReject(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


class Deduction(BaseModel):
    """Quantity taken from one scanned box."""

    model_config = ConfigDict(extra="forbid")

    barcode: str = Field(..., min_length=1, max_length=64)
    quantity: int = Field(..., gt=0)

    @field_validator("barcode")
    @classmethod
    def strip_barcode(cls, v: str) -> str:
        return v.strip()


class StockOutProcessRequest(BaseModel):
    """Boxes scanned to fulfil an approved stock-out."""

    model_config = ConfigDict(extra="forbid")

    deductions: list[Deduction] = Field(..., min_length=1, max_length=1000)
    invoice_number: str | None = Field(None, max_length=50)
    packing_slip_number: str | None = Field(None, max_length=50)


class StockOutDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    inventory_id: int
    barcode: str
    quantity: int
    processed_by: int | None = None
    created_at: datetime


class StockOutResponse(BaseModel):
    """Stock-out request details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    destination: str
    reason: str | None = None
    status: StockOutStatus
    requested_by: int
    approved_by: int | None = None
    approved_quantity: int | None = None
    rejection_reason: str | None = None
    processed_by: int | None = None
    processed_at: datetime | None = None
    invoice_number: str | None = None
    packing_slip_number: str | None = None
    reference_number: str | None = None
    sales_order_id: int | None = None
    created_at: datetime
    updated_at: datetime


class StockOutDetailedResponse(StockOutResponse):
    """Stock-out with the box deductions made while processing it."""

    details: list[StockOutDetailResponse]
