"""API routes for sales orders."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.profiles.deps import require_sales
from wms.features.profiles.models import Profile
from wms.features.sales_orders.models import OrderStatus
from wms.features.sales_orders.schemas import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
    OrderTotals,
    PushToStockOutResponse,
)
from wms.features.sales_orders.service import SalesOrderService
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/sales-orders", tags=["sales-orders"])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a sales order",
    description="Order numbers are assigned as `SO-YYYYMMDD-NNNN` per order date.",
)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> OrderResponse:
    return await SalesOrderService().create_order(db=db, data=data, creator=sales)


@router.get("", response_model=PaginatedResponse[OrderResponse], summary="List sales orders")
async def list_orders(
    pagination: PaginationParams = Depends(),
    status: OrderStatus | None = Query(None),
    search: str | None = Query(None, max_length=100, description="Number, name or company"),
    date_from: date | None = Query(None, description="Order date on or after"),
    date_to: date | None = Query(None, description="Order date on or before"),
    db: AsyncSession = Depends(get_db),
    _sales: Profile = Depends(require_sales),
) -> PaginatedResponse[OrderResponse]:
    return await SalesOrderService().list_orders(
        db=db,
        pagination=pagination,
        status=status,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/{order_id}", response_model=OrderResponse, summary="Get a sales order")
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _sales: Profile = Depends(require_sales),
) -> OrderResponse:
    return await SalesOrderService().get_order(db=db, order_id=order_id)


@router.get("/{order_id}/totals", response_model=OrderTotals, summary="Order totals")
async def order_totals(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _sales: Profile = Depends(require_sales),
) -> OrderTotals:
    return await SalesOrderService().order_totals(db=db, order_id=order_id)


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Change order status",
    description=(
        "pending → confirmed → processing → dispatched → completed; "
        "pending or confirmed orders can be cancelled."
    ),
)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> OrderResponse:
    return await SalesOrderService().update_status(
        db=db, order_id=order_id, new_status=data.status, actor=sales
    )


@router.post(
    "/{order_id}/push-to-stock-out",
    response_model=PushToStockOutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create stock-out requests for a confirmed order",
)
async def push_to_stock_out(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> PushToStockOutResponse:
    return await SalesOrderService().push_to_stock_out(db=db, order_id=order_id, actor=sales)
