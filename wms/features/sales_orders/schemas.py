"""Pydantic schemas for sales orders."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from wms.features.profiles.schemas import EMAIL_PATTERN
from wms.features.sales_orders.models import OrderStatus
from wms.features.stock_out.schemas import StockOutResponse


class OrderItemInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    requirements: str | None = Field(None, max_length=2000)


class OrderCreate(BaseModel):
    """New sales order entered by a sales operator."""

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    customer_company: str | None = Field(None, max_length=150)
    customer_phone: str | None = Field(None, max_length=30)
    inquiry_id: int | None = Field(None, ge=1)
    order_date: date | None = Field(None, description="Defaults to today")
    items: list[OrderItemInput] = Field(..., min_length=1, max_length=200)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    requirements: str | None = None


class OrderResponse(BaseModel):
    """Sales order with its lines."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    sales_order_number: str
    customer_name: str
    customer_email: str | None = None
    customer_company: str | None = None
    customer_phone: str | None = None
    inquiry_id: int | None = None
    status: OrderStatus
    order_date: date
    total_amount: Decimal
    pushed_to_stockout: bool
    created_by: int | None = None
    items: list[OrderItemResponse]
    created_at: datetime
    updated_at: datetime


class OrderTotals(BaseModel):
    order_id: int
    line_count: int
    total_quantity: int
    total_amount: Decimal


class PushToStockOutResponse(BaseModel):
    """Stock-out requests created for an order."""

    order: OrderResponse
    stock_outs: list[StockOutResponse]
