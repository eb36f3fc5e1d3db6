"""Pydantic schemas for the product catalog."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductBase(BaseModel):
    """Fields shared by create and update."""

    description: str | None = None
    category: str | None = Field(None, max_length=100)
    specifications: str | None = None
    image_url: str | None = Field(None, max_length=500)
    hsn_code: str | None = Field(None, max_length=20, pattern=r"^[0-9]{2,8}$")
    gst_rate: Decimal | None = Field(None, ge=0, le=100, decimal_places=2)


class ProductCreate(ProductBase):
    """Request body to create a product."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=200)
    sku: str | None = Field(None, min_length=1, max_length=50)

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        """SKUs are stored upper-case without surrounding whitespace."""
        return v.strip().upper() if v else None


class ProductUpdate(ProductBase):
    """Partial update; only provided fields change."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    sku: str | None = Field(None, min_length=1, max_length=50)
    is_active: bool | None = None

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        """SKUs are stored upper-case without surrounding whitespace."""
        return v.strip().upper() if v else None


class ProductResponse(BaseModel):
    """Product details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sku: str | None = None
    description: str | None = None
    category: str | None = None
    specifications: str | None = None
    image_url: str | None = None
    hsn_code: str | None = None
    gst_rate: Decimal | None = None
    is_active: bool
    created_by: int | None = None
    created_at: datetime
    updated_at: datetime


class ProductStockResponse(BaseModel):
    """Public storefront row: product plus in-stock quantity."""

    id: int
    name: str
    sku: str | None = None
    description: str | None = None
    image_url: str | None = None
    specifications: str | None = None
    category: str | None = None
    in_stock_quantity: int = Field(..., ge=0)
    is_out_of_stock: bool
