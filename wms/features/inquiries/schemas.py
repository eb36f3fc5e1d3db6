"""Pydantic schemas for customer inquiries."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wms.features.inquiries.models import InquiryStatus
from wms.features.profiles.schemas import EMAIL_PATTERN


class InquiryItemInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., gt=0, le=1_000_000)
    specific_requirements: str | None = Field(None, max_length=2000)


class InquirySubmit(BaseModel):
    """Inquiry from the storefront form."""

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    customer_company: str | None = Field(None, max_length=150)
    customer_phone: str | None = Field(None, max_length=30)
    message: str | None = Field(None, max_length=5000)
    items: list[InquiryItemInput] = Field(..., min_length=1, max_length=100)

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("customer_name must not be blank")
        return stripped

    @field_validator("customer_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class InquiryRespond(BaseModel):
    response: str = Field(..., min_length=1, max_length=5000)


Price = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class InquiryConvert(BaseModel):
    """Pricing for the order created from an inquiry."""

    model_config = ConfigDict(extra="forbid")

    unit_prices: dict[int, Price] = Field(
        default_factory=dict, description="Unit price per product id; missing products cost 0"
    )
    order_date: date | None = None


class InquiryFilters(BaseModel):
    status: InquiryStatus | None = None
    search: str | None = None
    date_from: date | None = None
    date_to: date | None = None


class InquiryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    specific_requirements: str | None = None


class InquiryResponse(BaseModel):
    """Inquiry with its product lines."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_name: str
    customer_email: str
    customer_company: str | None = None
    customer_phone: str | None = None
    message: str | None = None
    response: str | None = None
    status: InquiryStatus
    customer_profile_id: int | None = None
    responded_by: int | None = None
    items: list[InquiryItemResponse]
    created_at: datetime
    updated_at: datetime
