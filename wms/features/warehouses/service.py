"""Warehouse and location management."""

from sqlalchemy import and_, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.batches.models import ProcessedBatch
from wms.features.inventory.models import (
    IN_STOCK_STATUSES,
    InventoryItem,
    InventoryMovement,
    InventoryStatus,
    InventoryTransfer,
)
from wms.features.warehouses.models import (
    Warehouse,
    WarehouseLocation,
    location_display_name,
)
from wms.features.warehouses.schemas import (
    LocationCreate,
    LocationResponse,
    LocationStock,
    WarehouseCreate,
    WarehouseResponse,
    WarehouseSummaryResponse,
    WarehouseUpdate,
)

logger = get_logger(__name__)


class WarehouseService:
    """CRUD for warehouses and their floor/zone locations."""

    async def _load(self, db: AsyncSession, warehouse_id: int) -> Warehouse:
        stmt = (
            select(Warehouse)
            .options(selectinload(Warehouse.locations))
            .where(Warehouse.id == warehouse_id)
            .execution_options(populate_existing=True)
        )
        warehouse = (await db.execute(stmt)).scalar_one_or_none()
        if warehouse is None:
            raise NotFoundError(message=f"Warehouse not found: {warehouse_id}")
        return warehouse

    async def _ensure_name_free(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: int | None = None,
    ) -> None:
        stmt = select(Warehouse.id).where(func.lower(Warehouse.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Warehouse.id != exclude_id)
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(message=f"Warehouse '{name}' already exists")

    async def get_location(
        self,
        db: AsyncSession,
        warehouse_id: int,
        location_id: int,
    ) -> WarehouseLocation:
        """Load a location and check it belongs to the warehouse.

        Raises:
            NotFoundError: If the location does not exist.
            ValidationError: If it belongs to another warehouse.
        """
        location = await db.get(WarehouseLocation, location_id)
        if location is None:
            raise NotFoundError(message=f"Location not found: {location_id}")
        if location.warehouse_id != warehouse_id:
            raise ValidationError(
                message="Location does not belong to the selected warehouse",
                details={"warehouse_id": warehouse_id, "location_id": location_id},
            )
        return location

    async def create_warehouse(
        self,
        db: AsyncSession,
        data: WarehouseCreate,
    ) -> WarehouseResponse:
        await self._ensure_name_free(db, data.name)

        warehouse = Warehouse(name=data.name, location=data.location, is_active=True)
        db.add(warehouse)
        await db.flush()

        logger.info("warehouses.warehouse_created", warehouse_id=warehouse.id, name=data.name)
        return WarehouseResponse.model_validate(await self._load(db, warehouse.id))

    async def list_warehouses(
        self,
        db: AsyncSession,
        include_inactive: bool = False,
    ) -> list[WarehouseResponse]:
        """All warehouses with their locations, ordered by name."""
        stmt = select(Warehouse).options(selectinload(Warehouse.locations))
        if not include_inactive:
            stmt = stmt.where(Warehouse.is_active.is_(True))
        stmt = stmt.order_by(Warehouse.name)

        warehouses = (await db.execute(stmt)).scalars().all()
        return [WarehouseResponse.model_validate(w) for w in warehouses]

    async def get_warehouse(self, db: AsyncSession, warehouse_id: int) -> WarehouseResponse:
        return WarehouseResponse.model_validate(await self._load(db, warehouse_id))

    async def update_warehouse(
        self,
        db: AsyncSession,
        warehouse_id: int,
        data: WarehouseUpdate,
    ) -> WarehouseResponse:
        warehouse = await self._load(db, warehouse_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != warehouse.name:
            await self._ensure_name_free(db, changes["name"], exclude_id=warehouse_id)

        for field, value in changes.items():
            setattr(warehouse, field, value)
        await db.flush()

        logger.info(
            "warehouses.warehouse_updated", warehouse_id=warehouse_id, fields=sorted(changes)
        )
        return WarehouseResponse.model_validate(await self._load(db, warehouse_id))

    async def delete_warehouse(self, db: AsyncSession, warehouse_id: int) -> None:
        """Delete a warehouse and its locations.

        Raises:
            ConflictError: If any box is still stored there.
        """
        warehouse = await self._load(db, warehouse_id)
        stmt = select(func.count(InventoryItem.id)).where(
            InventoryItem.warehouse_id == warehouse_id
        )
        if (await db.execute(stmt)).scalar_one() > 0:
            raise ConflictError(
                message="Warehouse still holds inventory; deactivate it instead",
                details={"warehouse_id": warehouse_id},
            )

        await db.delete(warehouse)
        await db.flush()
        logger.info("warehouses.warehouse_deleted", warehouse_id=warehouse_id)

    async def create_location(
        self,
        db: AsyncSession,
        warehouse_id: int,
        data: LocationCreate,
    ) -> LocationResponse:
        """Add a floor/zone location.

        Raises:
            ConflictError: If the floor/zone pair already exists in the warehouse.
        """
        await self._load(db, warehouse_id)

        stmt = select(WarehouseLocation.id).where(
            WarehouseLocation.warehouse_id == warehouse_id,
            WarehouseLocation.floor == data.floor,
            WarehouseLocation.zone == data.zone,
        )
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(
                message=f"{location_display_name(data.floor, data.zone)} already exists",
                details={"floor": data.floor, "zone": data.zone},
            )

        location = WarehouseLocation(warehouse_id=warehouse_id, floor=data.floor, zone=data.zone)
        db.add(location)
        await db.flush()
        await db.refresh(location)

        logger.info(
            "warehouses.location_created",
            warehouse_id=warehouse_id,
            location_id=location.id,
            floor=data.floor,
            zone=data.zone,
        )
        return LocationResponse.model_validate(location)

    async def list_locations(
        self,
        db: AsyncSession,
        warehouse_id: int,
    ) -> list[LocationResponse]:
        await self._load(db, warehouse_id)
        stmt = (
            select(WarehouseLocation)
            .where(WarehouseLocation.warehouse_id == warehouse_id)
            .order_by(WarehouseLocation.floor, WarehouseLocation.zone)
        )
        locations = (await db.execute(stmt)).scalars().all()
        return [LocationResponse.model_validate(loc) for loc in locations]

    async def delete_location(
        self,
        db: AsyncSession,
        warehouse_id: int,
        location_id: int,
    ) -> None:
        """Remove a location that never held stock.

        Raises:
            ConflictError: Boxes with units are still stored there, or the
                location appears in batches, movements or transfers.
        """
        location = await self.get_location(db, warehouse_id, location_id)
        stocked = select(func.count(InventoryItem.id)).where(
            InventoryItem.location_id == location_id,
            InventoryItem.status != InventoryStatus.SOLD.value,
            InventoryItem.quantity > 0,
        )
        box_count = (await db.execute(stocked)).scalar_one()
        if box_count > 0:
            raise ConflictError(
                message=f"{location.display_name} still holds {box_count} box(es)",
                details={"location_id": location_id, "box_count": box_count},
            )

        history = select(
            or_(
                exists().where(InventoryItem.location_id == location_id),
                exists().where(ProcessedBatch.location_id == location_id),
                exists().where(InventoryMovement.location_id == location_id),
                exists().where(
                    or_(
                        InventoryTransfer.source_location_id == location_id,
                        InventoryTransfer.destination_location_id == location_id,
                    )
                ),
            )
        )
        if (await db.execute(history)).scalar_one():
            raise ConflictError(
                message=(
                    f"{location.display_name} is empty but has stock history "
                    "and is kept for traceability"
                ),
                details={"location_id": location_id, "box_count": 0},
            )

        await db.delete(location)
        await db.flush()
        logger.info(
            "warehouses.location_deleted", warehouse_id=warehouse_id, location_id=location_id
        )

    async def warehouse_summary(
        self,
        db: AsyncSession,
        warehouse_id: int,
    ) -> WarehouseSummaryResponse:
        """Boxes and units in stock per location of a warehouse."""
        warehouse = await self._load(db, warehouse_id)

        stmt = (
            select(
                WarehouseLocation.id,
                WarehouseLocation.floor,
                WarehouseLocation.zone,
                func.count(InventoryItem.id),
                func.coalesce(func.sum(InventoryItem.quantity), 0),
            )
            .outerjoin(
                InventoryItem,
                and_(
                    InventoryItem.location_id == WarehouseLocation.id,
                    InventoryItem.status.in_(IN_STOCK_STATUSES),
                ),
            )
            .where(WarehouseLocation.warehouse_id == warehouse_id)
            .group_by(WarehouseLocation.id, WarehouseLocation.floor, WarehouseLocation.zone)
            .order_by(WarehouseLocation.floor, WarehouseLocation.zone)
        )
        rows = (await db.execute(stmt)).all()

        locations = [
            LocationStock(
                location_id=loc_id,
                display_name=location_display_name(floor, zone),
                box_count=int(boxes),
                total_quantity=int(qty),
            )
            for loc_id, floor, zone, boxes, qty in rows
        ]
        return WarehouseSummaryResponse(
            warehouse_id=warehouse.id,
            warehouse_name=warehouse.name,
            total_boxes=sum(loc.box_count for loc in locations),
            total_quantity=sum(loc.total_quantity for loc in locations),
            locations=locations,
        )
