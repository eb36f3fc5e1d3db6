"""API routes for the stock-in workflow."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.profiles.deps import require_manager, require_staff, require_stock_submitter
from wms.features.profiles.models import Profile
from wms.features.stock_in.models import StockInStatus
from wms.features.stock_in.schemas import (
    StockInCreate,
    StockInProcessRequest,
    StockInProcessResponse,
    StockInReject,
    StockInResponse,
)
from wms.features.stock_in.service import StockInService
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/stock-in", tags=["stock-in"])


@router.post(
    "",
    response_model=StockInResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a stock-in request",
)
async def submit_stock_in(
    data: StockInCreate,
    db: AsyncSession = Depends(get_db),
    submitter: Profile = Depends(require_stock_submitter),
) -> StockInResponse:
    return await StockInService().submit_stock_in(db=db, data=data, submitter=submitter)


@router.get(
    "",
    response_model=PaginatedResponse[StockInResponse],
    summary="List stock-in requests",
    description="""
List stock-in requests, newest first.

Field operators only see the requests they submitted; the `submitted_by`
filter is ignored for them.
""",
)
async def list_stock_ins(
    pagination: PaginationParams = Depends(),
    status: StockInStatus | None = Query(None, description="Filter by status"),
    product_id: int | None = Query(None, description="Filter by product"),
    submitted_by: int | None = Query(None, description="Filter by submitter"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_staff),
) -> PaginatedResponse[StockInResponse]:
    return await StockInService().list_stock_ins(
        db=db,
        profile=profile,
        pagination=pagination,
        status=status,
        product_id=product_id,
        submitted_by=submitted_by,
    )


@router.get("/{stock_in_id}", response_model=StockInResponse, summary="Get a stock-in request")
async def get_stock_in(
    stock_in_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_staff),
) -> StockInResponse:
    return await StockInService().get_stock_in(db=db, stock_in_id=stock_in_id, profile=profile)


@router.post(
    "/{stock_in_id}/approve",
    response_model=StockInResponse,
    summary="Approve a pending stock-in",
)
async def approve_stock_in(
    stock_in_id: int,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockInResponse:
    return await StockInService().approve_stock_in(
        db=db, stock_in_id=stock_in_id, manager=manager
    )


@router.post(
    "/{stock_in_id}/reject",
    response_model=StockInResponse,
    summary="Reject a pending stock-in",
)
async def reject_stock_in(
    stock_in_id: int,
    data: StockInReject,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockInResponse:
    return await StockInService().reject_stock_in(
        db=db, stock_in_id=stock_in_id, reason=data.reason, manager=manager
    )


@router.post(
    "/{stock_in_id}/process",
    response_model=StockInProcessResponse,
    summary="Process an approved stock-in into batches",
    description="""
Create batches, boxes, inventory rows and `in` ledger entries for an
approved stock-in. A stock-in whose previous attempt failed may be
processed again.

Each batch either lists its `boxes` explicitly or gives `quantity_per_box`
with an optional `box_count` and `base_barcode`. Generated barcodes are the
digits of the base barcode followed by the 3-digit box number:

```json
{
  "batches": [
    {"warehouse_id": 1, "location_id": 4, "box_count": 3,
     "quantity_per_box": 24, "base_barcode": "BC1001", "color": "Red"}
  ]
}
```
produces boxes `1001001`, `1001002`, `1001003`.

The operation is all-or-nothing. On failure nothing is written, the
stock-in is marked `failed` with `error_message`, and the error is returned.
""",
)
async def process_stock_in(
    stock_in_id: int,
    request: StockInProcessRequest,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> StockInProcessResponse:
    return await StockInService().process_stock_in(
        db=db, stock_in_id=stock_in_id, request=request, manager=manager
    )
