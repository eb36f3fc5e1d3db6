"""API routes for inventory, barcode scanning, the ledger and transfers."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.inventory.models import (
    InventoryStatus,
    MovementStatus,
    MovementType,
    TransferStatus,
)
from wms.features.inventory.schemas import (
    AdjustmentRequest,
    InventoryItemResponse,
    MovementFilters,
    MovementResponse,
    ScanRequest,
    ScanResult,
    StockLevel,
    TransferCreate,
    TransferReject,
    TransferResponse,
)
from wms.features.inventory.service import InventoryService
from wms.features.profiles.deps import require_manager, require_staff, require_stock_submitter
from wms.features.profiles.models import Profile
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get(
    "",
    response_model=PaginatedResponse[InventoryItemResponse],
    summary="List boxes on hand",
)
async def list_inventory(
    pagination: PaginationParams = Depends(),
    product_id: int | None = Query(None, description="Filter by product"),
    warehouse_id: int | None = Query(None, description="Filter by warehouse"),
    location_id: int | None = Query(None, description="Filter by location"),
    status: InventoryStatus | None = Query(None, description="Filter by box status"),
    batch_id: int | None = Query(None, description="Filter by batch"),
    search: str | None = Query(None, max_length=100, description="Barcode or product name"),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> PaginatedResponse[InventoryItemResponse]:
    return await InventoryService().list_inventory(
        db=db,
        pagination=pagination,
        product_id=product_id,
        warehouse_id=warehouse_id,
        location_id=location_id,
        status=status,
        batch_id=batch_id,
        search=search,
    )


@router.post(
    "/scan",
    response_model=ScanResult,
    summary="Scan a box barcode",
    description="""
Look up a box by barcode: product, location, attributes and movement history.

Field operators do not receive `total_product_quantity` and only get the most
recent history entry. Every scan is recorded in the ledger as a zero-quantity
adjustment with `details.event_type = "scan"`.
""",
)
async def scan_barcode(
    data: ScanRequest,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_staff),
) -> ScanResult:
    return await InventoryService().lookup_barcode(db=db, barcode=data.barcode, profile=profile)


@router.get(
    "/summary",
    response_model=list[StockLevel],
    summary="Stock level per product and location",
    description="Ledger balance per (product, warehouse, location); zero balances are omitted.",
)
async def inventory_summary(
    product_id: int | None = Query(None, description="Filter by product"),
    warehouse_id: int | None = Query(None, description="Filter by warehouse"),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> list[StockLevel]:
    return await InventoryService().inventory_summary(
        db=db, product_id=product_id, warehouse_id=warehouse_id
    )


@router.get(
    "/movements",
    response_model=PaginatedResponse[MovementResponse],
    summary="Inventory ledger",
)
async def list_movements(
    pagination: PaginationParams = Depends(),
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    location_id: int | None = Query(None),
    movement_type: MovementType | None = Query(None),
    status: MovementStatus | None = Query(None),
    date_from: date | None = Query(None, description="Inclusive start date"),
    date_to: date | None = Query(None, description="Inclusive end date"),
    reference_table: str | None = Query(None, max_length=50),
    reference_id: str | None = Query(None, max_length=50),
    performed_by: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> PaginatedResponse[MovementResponse]:
    filters = MovementFilters(
        product_id=product_id,
        warehouse_id=warehouse_id,
        location_id=location_id,
        movement_type=movement_type,
        status=status,
        date_from=date_from,
        date_to=date_to,
        reference_table=reference_table,
        reference_id=reference_id,
        performed_by=performed_by,
    )
    return await InventoryService().list_movements(db=db, pagination=pagination, filters=filters)


@router.post(
    "/{inventory_id}/adjust",
    response_model=InventoryItemResponse,
    summary="Adjust a box",
    description="Set a box quantity and/or status; the delta is recorded as an adjustment.",
)
async def adjust_inventory(
    inventory_id: int,
    data: AdjustmentRequest,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> InventoryItemResponse:
    return await InventoryService().adjust_inventory(
        db=db, inventory_id=inventory_id, data=data, actor=manager
    )


# =============================================================================
# Transfers
# =============================================================================


@router.get(
    "/transfers",
    response_model=PaginatedResponse[TransferResponse],
    summary="List transfers",
)
async def list_transfers(
    pagination: PaginationParams = Depends(),
    status: TransferStatus | None = Query(None),
    product_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> PaginatedResponse[TransferResponse]:
    return await InventoryService().list_transfers(
        db=db, pagination=pagination, status=status, product_id=product_id
    )


@router.post(
    "/transfers",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a transfer",
    description="""
Request moving scanned boxes of one product from a source location to a
destination location. Boxes must be `available` at the source; they are held
`in_transit` until the transfer is approved or rejected.
""",
)
async def create_transfer(
    data: TransferCreate,
    db: AsyncSession = Depends(get_db),
    actor: Profile = Depends(require_stock_submitter),
) -> TransferResponse:
    return await InventoryService().create_transfer(db=db, data=data, actor=actor)


@router.post(
    "/transfers/{transfer_id}/approve",
    response_model=TransferResponse,
    summary="Approve and execute a transfer",
)
async def approve_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> TransferResponse:
    return await InventoryService().approve_transfer(
        db=db, transfer_id=transfer_id, actor=manager
    )


@router.post(
    "/transfers/{transfer_id}/reject",
    response_model=TransferResponse,
    summary="Reject a transfer",
)
async def reject_transfer(
    transfer_id: int,
    data: TransferReject,
    db: AsyncSession = Depends(get_db),
    manager: Profile = Depends(require_manager),
) -> TransferResponse:
    return await InventoryService().reject_transfer(
        db=db, transfer_id=transfer_id, reason=data.reason, actor=manager
    )
