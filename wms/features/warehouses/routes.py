"""API routes for warehouses and storage locations."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.profiles.deps import require_admin, require_manager, require_staff
from wms.features.profiles.models import Profile
from wms.features.warehouses.schemas import (
    LocationCreate,
    LocationResponse,
    WarehouseCreate,
    WarehouseResponse,
    WarehouseSummaryResponse,
    WarehouseUpdate,
)
from wms.features.warehouses.service import WarehouseService

router = APIRouter(prefix="/warehouses", tags=["warehouses"])


# =============================================================================
# Warehouses
# =============================================================================


@router.get("", response_model=list[WarehouseResponse], summary="List warehouses")
async def list_warehouses(
    include_inactive: bool = Query(False, description="Include deactivated warehouses"),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> list[WarehouseResponse]:
    return await WarehouseService().list_warehouses(db=db, include_inactive=include_inactive)


@router.post(
    "",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a warehouse (admin)",
)
async def create_warehouse(
    data: WarehouseCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> WarehouseResponse:
    return await WarehouseService().create_warehouse(db=db, data=data)


@router.get("/{warehouse_id}", response_model=WarehouseResponse, summary="Get a warehouse")
async def get_warehouse(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> WarehouseResponse:
    return await WarehouseService().get_warehouse(db=db, warehouse_id=warehouse_id)


@router.patch(
    "/{warehouse_id}", response_model=WarehouseResponse, summary="Update a warehouse (admin)"
)
async def update_warehouse(
    warehouse_id: int,
    data: WarehouseUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> WarehouseResponse:
    return await WarehouseService().update_warehouse(db=db, warehouse_id=warehouse_id, data=data)


@router.delete(
    "/{warehouse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an empty warehouse (admin)",
)
async def delete_warehouse(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> Response:
    await WarehouseService().delete_warehouse(db=db, warehouse_id=warehouse_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{warehouse_id}/summary",
    response_model=WarehouseSummaryResponse,
    summary="Stock per location",
    description="Box count and total units in stock (available or reserved) per location.",
)
async def warehouse_summary(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> WarehouseSummaryResponse:
    return await WarehouseService().warehouse_summary(db=db, warehouse_id=warehouse_id)


# =============================================================================
# Locations
# =============================================================================


@router.get(
    "/{warehouse_id}/locations",
    response_model=list[LocationResponse],
    summary="List locations of a warehouse",
)
async def list_locations(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> list[LocationResponse]:
    return await WarehouseService().list_locations(db=db, warehouse_id=warehouse_id)


@router.post(
    "/{warehouse_id}/locations",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a floor/zone location",
)
async def create_location(
    warehouse_id: int,
    data: LocationCreate,
    db: AsyncSession = Depends(get_db),
    _manager: Profile = Depends(require_manager),
) -> LocationResponse:
    return await WarehouseService().create_location(db=db, warehouse_id=warehouse_id, data=data)


@router.delete(
    "/{warehouse_id}/locations/{location_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an empty location",
    description="Returns 409 when boxes are still stored at the location.",
)
async def delete_location(
    warehouse_id: int,
    location_id: int,
    db: AsyncSession = Depends(get_db),
    _manager: Profile = Depends(require_manager),
) -> Response:
    await WarehouseService().delete_location(
        db=db, warehouse_id=warehouse_id, location_id=location_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
