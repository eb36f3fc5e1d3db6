"""API routes for the stock-out workflow."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.profiles.deps import require_manager, require_staff
from wms.features.profiles.models import Profile
from wms.features.stock_out.models import StockOutStatus
from wms.features.stock_out.schemas import (
    StockOutApprove,
    StockOutCreate,
    StockOutDetailedResponse,
    StockOutProcessRequest,
    StockOutReject,
    StockOutResponse,
)
from wms.features.stock_out.service import StockOutService
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/stock-out", tags=["stock-out"])


@router.post(
    "",
    response_model=StockOutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a stock-out",
)
async def create_stock_out(
    data: StockOutCreate,
    db: AsyncSession = Depends(get_db),
    requester: Profile = Depends(require_staff),
) -> StockOutResponse:
    return await StockOutService().create_stock_out(db=db, data=data, requester=requester)


@router.get(
    "",
    response_model=PaginatedResponse[StockOutResponse],
    summary="List stock-out requests",
)
async def list_stock_outs(
    pagination: PaginationParams = Depends(),
    status: StockOutStatus | None = Query(None, description="Filter by status"),
    product_id: int | None = Query(None),
    requested_by: int | None = Query(None),
    sales_order_id: int | None = Query(None),
    search: str | None = Query(None, max_length=100, description="Destination or reference"),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> PaginatedResponse[StockOutResponse]:
    return await StockOutService().list_stock_outs(
        db=db,
        pagination=pagination,
        status=status,
        product_id=product_id,
        requested_by=requested_by,
        sales_order_id=sales_order_id,
        search=search,
    )


@router.get(
    "/{stock_out_id}",
    response_model=StockOutDetailedResponse,
    summary="Get a stock-out with its box deductions",
)
async def get_stock_out(
    stock_out_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> StockOutDetailedResponse:
    return await StockOutService().get_stock_out(db=db, stock_out_id=stock_out_id)


@router.post(
    "/{stock_out_id}/approve",
    response_model=StockOutResponse,
    summary="Approve a pending stock-out",
    description="Optionally approve a smaller quantity than requested.",
)
async def approve_stock_out(
    stock_out_id: int,
    data: StockOutApprove | None = None,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockOutResponse:
    return await StockOutService().approve_stock_out(
        db=db,
        stock_out_id=stock_out_id,
        manager=manager,
        approved_quantity=data.approved_quantity if data else None,
    )


@router.post(
    "/{stock_out_id}/reject",
    response_model=StockOutResponse,
    summary="Reject a pending stock-out",
)
async def reject_stock_out(
    stock_out_id: int,
    data: StockOutReject,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockOutResponse:
    return await StockOutService().reject_stock_out(
        db=db, stock_out_id=stock_out_id, reason=data.reason, manager=manager
    )


@router.post(
    "/{stock_out_id}/process",
    response_model=StockOutDetailedResponse,
    summary="Deduct scanned boxes and complete a stock-out",
    description="""
Submit the scanned boxes and the quantity taken from each:

```json
{"deductions": [{"barcode": "1001001", "quantity": 24},
                {"barcode": "1001002", "quantity": 6}]}
```

Everything is validated before any change: barcodes must exist, be in stock,
belong to the stock-out's product, appear once, and each quantity must not
exceed its box. The total must cover the approved quantity (or the requested
quantity when none was approved), otherwise `409 Insufficient Stock`.

A box emptied to zero becomes `sold`. When the stock-out belongs to a sales
order and it was the order's last open stock-out, the order is marked
`dispatched` and its inquiry `completed`.
""",
)
async def process_stock_out(
    stock_out_id: int,
    request: StockOutProcessRequest,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockOutDetailedResponse:
    return await StockOutService().process_stock_out(
        db=db, stock_out_id=stock_out_id, request=request, manager=manager
    )
