"""Inventory service: boxes on hand, barcode scans, the ledger and transfers.

Every change to a box's quantity or location goes through this module's
helpers so that a matching InventoryMovement is always written in the same
transaction.
"""

from datetime import UTC, datetime, time, timedelta
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.batches.models import BatchItem, ProcessedBatch
from wms.features.catalog.models import Product
from wms.features.inventory.models import (
    IN_STOCK_STATUSES,
    VALID_TRANSFER_TRANSITIONS,
    InventoryItem,
    InventoryMovement,
    InventoryStatus,
    InventoryTransfer,
    MovementStatus,
    MovementType,
    TransferStatus,
)
from wms.features.inventory.schemas import (
    AdjustmentRequest,
    InventoryItemResponse,
    MovementFilters,
    MovementResponse,
    ScanHistoryEntry,
    ScannedLocation,
    ScannedProduct,
    ScanResult,
    StockLevel,
    TransferCreate,
    TransferResponse,
)
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Profile, Role
from wms.features.warehouses.models import Warehouse, WarehouseLocation, location_display_name
from wms.features.warehouses.service import WarehouseService
from wms.shared import (
    PaginatedResponse,
    PaginationParams,
    fetch_page,
    paginate_response,
    validate_transition,
)

logger = get_logger(__name__)

SCAN_EVENT = "scan"

MOVEMENT_LABELS: dict[str, str] = {
    MovementType.IN.value: "Stock In",
    MovementType.OUT.value: "Stock Out",
    MovementType.ADJUSTMENT.value: "Adjustment",
    MovementType.RESERVE.value: "Reserved",
    MovementType.RELEASE.value: "Released",
    MovementType.TRANSFER.value: "Location Change",
}


# =============================================================================
# Ledger helpers
# =============================================================================


def new_movement(
    item: InventoryItem,
    movement_type: MovementType,
    quantity: int,
    performed_by: int | None,
    *,
    reference_table: str | None = None,
    reference_id: int | str | None = None,
    details: dict[str, Any] | None = None,
    status: MovementStatus = MovementStatus.APPROVED,
    warehouse_id: int | None = None,
    location_id: int | None = None,
) -> InventoryMovement:
    """Build a ledger entry for a box.

    The box must already be flushed so it has an id. ``warehouse_id`` and
    ``location_id`` default to the box's current position.
    """
    return InventoryMovement(
        product_id=item.product_id,
        warehouse_id=warehouse_id if warehouse_id is not None else item.warehouse_id,
        location_id=location_id if location_id is not None else item.location_id,
        inventory_id=item.id,
        movement_type=movement_type.value,
        quantity=quantity,
        status=status.value,
        reference_table=reference_table,
        reference_id=str(reference_id) if reference_id is not None else None,
        performed_by=performed_by,
        details={"barcode": item.barcode, **(details or {})},
    )


def sellable_quantity(quantity: int, status: str) -> int:
    """Units a box contributes to the ledger balance; damaged boxes count 0."""
    return quantity if status in IN_STOCK_STATUSES else 0


async def sync_batch_item(db: AsyncSession, item: InventoryItem) -> None:
    """Mirror a box's quantity, status and position onto its batch item."""
    await db.execute(
        update(BatchItem)
        .where(BatchItem.barcode == item.barcode)
        .values(
            quantity=item.quantity,
            status=item.status,
            warehouse_id=item.warehouse_id,
            location_id=item.location_id,
        )
    )


async def existing_barcodes(db: AsyncSession, barcodes: list[str]) -> list[str]:
    """Subset of ``barcodes`` already used by a box or batch item."""
    if not barcodes:
        return []
    in_inventory = select(InventoryItem.barcode).where(InventoryItem.barcode.in_(barcodes))
    in_batches = select(BatchItem.barcode).where(BatchItem.barcode.in_(barcodes))
    result = await db.execute(in_inventory.union(in_batches))
    return sorted(result.scalars().all())


def _day_bounds(date_from: Any, date_to: Any) -> tuple[datetime | None, datetime | None]:
    start = datetime.combine(date_from, time.min, tzinfo=UTC) if date_from else None
    end = (
        datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=UTC) if date_to else None
    )
    return start, end


class InventoryService:
    """Query and change inventory."""

    def __init__(self) -> None:
        self.notifications = NotificationService()
        self.warehouses = WarehouseService()

    async def get_by_barcode(
        self,
        db: AsyncSession,
        barcode: str,
        for_update: bool = False,
    ) -> InventoryItem:
        """Load a box by barcode.

        Raises:
            NotFoundError: If no box carries the barcode.
        """
        stmt = select(InventoryItem).where(InventoryItem.barcode == barcode)
        if for_update:
            stmt = stmt.with_for_update()
        item = (await db.execute(stmt)).scalar_one_or_none()
        if item is None:
            raise NotFoundError(
                message=f"No box found with barcode '{barcode}'", details={"barcode": barcode}
            )
        return item

    async def list_inventory(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        product_id: int | None = None,
        warehouse_id: int | None = None,
        location_id: int | None = None,
        status: InventoryStatus | None = None,
        batch_id: int | None = None,
        search: str | None = None,
    ) -> PaginatedResponse[InventoryItemResponse]:
        """List boxes; ``search`` matches barcode or product name."""
        stmt = select(InventoryItem)
        if product_id is not None:
            stmt = stmt.where(InventoryItem.product_id == product_id)
        if warehouse_id is not None:
            stmt = stmt.where(InventoryItem.warehouse_id == warehouse_id)
        if location_id is not None:
            stmt = stmt.where(InventoryItem.location_id == location_id)
        if status is not None:
            stmt = stmt.where(InventoryItem.status == status.value)
        if batch_id is not None:
            stmt = stmt.where(InventoryItem.batch_id == batch_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.join(Product, Product.id == InventoryItem.product_id).where(
                or_(InventoryItem.barcode.ilike(pattern), Product.name.ilike(pattern))
            )

        rows, total = await fetch_page(
            db, stmt, pagination, InventoryItem.created_at.desc(), InventoryItem.id.desc()
        )
        return paginate_response(
            [InventoryItemResponse.model_validate(i) for i in rows], total, pagination
        )

    # =========================================================================
    # Barcode scan
    # =========================================================================

    async def lookup_barcode(
        self,
        db: AsyncSession,
        barcode: str,
        profile: Profile,
    ) -> ScanResult:
        """Resolve a scanned barcode and record the scan.

        Field operators do not see the product-wide total and only get the
        most recent history entry.

        Raises:
            NotFoundError: If the barcode is unknown.
        """
        item = await self.get_by_barcode(db, barcode)
        product = await db.get(Product, item.product_id)
        warehouse = await db.get(Warehouse, item.warehouse_id)
        location = await db.get(WarehouseLocation, item.location_id)
        if product is None or warehouse is None or location is None:
            raise NotFoundError(message=f"Box '{barcode}' references missing catalog data")

        batch_number = None
        if item.batch_id is not None:
            batch = await db.get(ProcessedBatch, item.batch_id)
            batch_number = batch.batch_number if batch else None

        is_field_operator = profile.role == Role.FIELD_OPERATOR.value

        history_stmt = (
            select(InventoryMovement, Profile.name, Profile.username)
            .outerjoin(Profile, Profile.id == InventoryMovement.performed_by)
            .where(
                InventoryMovement.inventory_id == item.id,
                InventoryMovement.details["event_type"].astext.is_distinct_from(SCAN_EVENT),
            )
            .order_by(InventoryMovement.created_at.desc(), InventoryMovement.id.desc())
            .limit(1 if is_field_operator else 50)
        )
        history = [
            ScanHistoryEntry(
                action=MOVEMENT_LABELS.get(m.movement_type, m.movement_type),
                movement_type=m.movement_type,
                quantity=m.quantity,
                timestamp=m.created_at,
                user=name or username,
            )
            for m, name, username in (await db.execute(history_stmt)).all()
        ]

        total_quantity = None
        if not is_field_operator:
            total_stmt = select(func.coalesce(func.sum(InventoryItem.quantity), 0)).where(
                InventoryItem.product_id == item.product_id,
                InventoryItem.status.in_(IN_STOCK_STATUSES),
            )
            total_quantity = int((await db.execute(total_stmt)).scalar_one())

        db.add(
            new_movement(
                item,
                MovementType.ADJUSTMENT,
                0,
                profile.id,
                reference_table="inventory",
                reference_id=item.id,
                details={"event_type": SCAN_EVENT, "role": profile.role},
            )
        )
        await db.flush()

        logger.info(
            "inventory.barcode_scanned",
            barcode=barcode,
            inventory_id=item.id,
            role=profile.role,
        )

        return ScanResult(
            id=item.id,
            barcode=item.barcode,
            product=ScannedProduct(
                id=product.id,
                name=product.name,
                sku=product.sku,
                description=product.description,
            ),
            box_quantity=item.quantity,
            total_product_quantity=total_quantity,
            status=item.status,
            attributes={"color": item.color, "size": item.size},
            location=ScannedLocation(
                warehouse_id=warehouse.id,
                warehouse=warehouse.name,
                location_id=location.id,
                floor=location.floor,
                zone=location.zone,
                display_name=location.display_name,
            ),
            batch_id=item.batch_id,
            batch_number=batch_number,
            history=history,
        )

    # =========================================================================
    # Ledger
    # =========================================================================

    async def list_movements(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: MovementFilters,
    ) -> PaginatedResponse[MovementResponse]:
        """Ledger entries, newest first."""
        stmt = select(InventoryMovement)
        if filters.product_id is not None:
            stmt = stmt.where(InventoryMovement.product_id == filters.product_id)
        if filters.warehouse_id is not None:
            stmt = stmt.where(InventoryMovement.warehouse_id == filters.warehouse_id)
        if filters.location_id is not None:
            stmt = stmt.where(InventoryMovement.location_id == filters.location_id)
        if filters.movement_type is not None:
            stmt = stmt.where(InventoryMovement.movement_type == filters.movement_type.value)
        if filters.status is not None:
            stmt = stmt.where(InventoryMovement.status == filters.status.value)
        if filters.reference_table is not None:
            stmt = stmt.where(InventoryMovement.reference_table == filters.reference_table)
        if filters.reference_id is not None:
            stmt = stmt.where(InventoryMovement.reference_id == filters.reference_id)
        if filters.performed_by is not None:
            stmt = stmt.where(InventoryMovement.performed_by == filters.performed_by)

        if filters.date_from and filters.date_to and filters.date_to < filters.date_from:
            raise ValidationError(message="date_to must be on or after date_from")
        start, end = _day_bounds(filters.date_from, filters.date_to)
        if start is not None:
            stmt = stmt.where(InventoryMovement.created_at >= start)
        if end is not None:
            stmt = stmt.where(InventoryMovement.created_at < end)

        rows, total = await fetch_page(
            db, stmt, pagination, InventoryMovement.created_at.desc(), InventoryMovement.id.desc()
        )
        return paginate_response(
            [MovementResponse.model_validate(m) for m in rows], total, pagination
        )

    async def inventory_summary(
        self,
        db: AsyncSession,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevel]:
        """Ledger balance per product and location; empty groups are omitted."""
        qty = func.sum(InventoryMovement.quantity)
        stmt = (
            select(
                InventoryMovement.product_id,
                Product.name,
                InventoryMovement.warehouse_id,
                Warehouse.name,
                InventoryMovement.location_id,
                WarehouseLocation.floor,
                WarehouseLocation.zone,
                qty,
            )
            .join(Product, Product.id == InventoryMovement.product_id)
            .join(Warehouse, Warehouse.id == InventoryMovement.warehouse_id)
            .join(WarehouseLocation, WarehouseLocation.id == InventoryMovement.location_id)
            .where(InventoryMovement.status == MovementStatus.APPROVED.value)
            .group_by(
                InventoryMovement.product_id,
                Product.name,
                InventoryMovement.warehouse_id,
                Warehouse.name,
                InventoryMovement.location_id,
                WarehouseLocation.floor,
                WarehouseLocation.zone,
            )
            .having(qty > 0)
            .order_by(Product.name, Warehouse.name, WarehouseLocation.floor, WarehouseLocation.zone)
        )
        if product_id is not None:
            stmt = stmt.where(InventoryMovement.product_id == product_id)
        if warehouse_id is not None:
            stmt = stmt.where(InventoryMovement.warehouse_id == warehouse_id)

        return [
            StockLevel(
                product_id=pid,
                product_name=pname,
                warehouse_id=wid,
                warehouse_name=wname,
                location_id=lid,
                location_name=location_display_name(floor, zone),
                quantity=int(total),
            )
            for pid, pname, wid, wname, lid, floor, zone, total in (await db.execute(stmt)).all()
        ]

    # =========================================================================
    # Adjustments
    # =========================================================================

    async def adjust_inventory(
        self,
        db: AsyncSession,
        inventory_id: int,
        data: AdjustmentRequest,
        actor: Profile,
    ) -> InventoryItemResponse:
        """Correct a box and record the delta as an adjustment movement.

        Raises:
            NotFoundError: Unknown box.
            ConflictError: Box is sold or in transit.
        """
        stmt = select(InventoryItem).where(InventoryItem.id == inventory_id).with_for_update()
        item = (await db.execute(stmt)).scalar_one_or_none()
        if item is None:
            raise NotFoundError(message=f"Inventory item not found: {inventory_id}")
        if item.status in (InventoryStatus.SOLD.value, InventoryStatus.IN_TRANSIT.value):
            raise ConflictError(
                message=f"Box '{item.barcode}' is {item.status} and cannot be adjusted",
                details={"barcode": item.barcode, "status": item.status},
            )

        previous_quantity, previous_status = item.quantity, item.status
        if data.quantity is not None:
            item.quantity = data.quantity
        if data.status is not None:
            item.status = data.status.value
        # Ledger follows sellable stock: damaging a box writes it off in full.
        delta = sellable_quantity(item.quantity, item.status) - sellable_quantity(
            previous_quantity, previous_status
        )

        db.add(
            new_movement(
                item,
                MovementType.ADJUSTMENT,
                delta,
                actor.id,
                reference_table="inventory",
                reference_id=item.id,
                details={
                    "reason": data.reason,
                    "previous_quantity": previous_quantity,
                    "new_quantity": item.quantity,
                    "previous_status": previous_status,
                    "new_status": item.status,
                },
            )
        )
        await sync_batch_item(db, item)
        await db.flush()
        await db.refresh(item)

        logger.info(
            "inventory.box_adjusted",
            inventory_id=inventory_id,
            barcode=item.barcode,
            delta=delta,
            previous_status=previous_status,
            new_status=item.status,
        )
        return InventoryItemResponse.model_validate(item)

    # =========================================================================
    # Transfers
    # =========================================================================

    async def _get_transfer(self, db: AsyncSession, transfer_id: int) -> InventoryTransfer:
        stmt = (
            select(InventoryTransfer)
            .where(InventoryTransfer.id == transfer_id)
            .with_for_update()
        )
        transfer = (await db.execute(stmt)).scalar_one_or_none()
        if transfer is None:
            raise NotFoundError(message=f"Transfer not found: {transfer_id}")
        return transfer

    @staticmethod
    def _advance_transfer(transfer: InventoryTransfer, target: TransferStatus) -> None:
        validate_transition(
            VALID_TRANSFER_TRANSITIONS,
            TransferStatus(transfer.status),
            target,
            "transfer",
            transfer.id,
        )
        transfer.status = target.value

    async def _transfer_boxes(
        self,
        db: AsyncSession,
        barcodes: list[str],
    ) -> list[InventoryItem]:
        stmt = (
            select(InventoryItem)
            .where(InventoryItem.barcode.in_(barcodes))
            .order_by(InventoryItem.barcode)
            .with_for_update()
        )
        return list((await db.execute(stmt)).scalars().all())

    async def create_transfer(
        self,
        db: AsyncSession,
        data: TransferCreate,
        actor: Profile,
    ) -> TransferResponse:
        """Request moving boxes; the boxes are held in transit until decided.

        Raises:
            ValidationError: Duplicate, unknown or ineligible barcodes.
        """
        await self.warehouses.get_location(db, data.source_warehouse_id, data.source_location_id)
        await self.warehouses.get_location(
            db, data.destination_warehouse_id, data.destination_location_id
        )

        if len(set(data.barcodes)) != len(data.barcodes):
            raise ValidationError(message="Each box can only be listed once")

        boxes = await self._transfer_boxes(db, data.barcodes)
        found = {box.barcode for box in boxes}
        missing = sorted(set(data.barcodes) - found)
        if missing:
            raise ValidationError(message="Unknown barcodes", details={"barcodes": missing})

        ineligible = [
            box.barcode
            for box in boxes
            if box.product_id != data.product_id
            or box.location_id != data.source_location_id
            or box.status != InventoryStatus.AVAILABLE.value
        ]
        if ineligible:
            raise ValidationError(
                message="Boxes must be available units of the product at the source location",
                details={"barcodes": ineligible},
            )

        transfer = InventoryTransfer(
            product_id=data.product_id,
            source_warehouse_id=data.source_warehouse_id,
            source_location_id=data.source_location_id,
            destination_warehouse_id=data.destination_warehouse_id,
            destination_location_id=data.destination_location_id,
            quantity=sum(box.quantity for box in boxes),
            status=TransferStatus.PENDING.value,
            notes=data.notes,
            initiated_by=actor.id,
            barcodes=sorted(found),
        )
        db.add(transfer)
        for box in boxes:
            box.status = InventoryStatus.IN_TRANSIT.value
            await sync_batch_item(db, box)
        await db.flush()
        await db.refresh(transfer)

        await self.notifications.notify_role(
            db,
            Role.WAREHOUSE_MANAGER,
            NotificationAction.TRANSFER_REQUESTED,
            title="Transfer requested",
            message=f"{len(boxes)} box(es) requested to move",
            metadata={"transfer_id": transfer.id},
        )

        logger.info(
            "inventory.transfer_created",
            transfer_id=transfer.id,
            box_count=len(boxes),
            quantity=transfer.quantity,
        )
        return TransferResponse.model_validate(transfer)

    async def approve_transfer(
        self,
        db: AsyncSession,
        transfer_id: int,
        actor: Profile,
    ) -> TransferResponse:
        """Move the boxes and write paired transfer movements."""
        transfer = await self._get_transfer(db, transfer_id)
        self._advance_transfer(transfer, TransferStatus.APPROVED)
        transfer.approved_by = actor.id

        boxes = await self._transfer_boxes(db, transfer.barcodes)
        for box in boxes:
            source_warehouse, source_location = box.warehouse_id, box.location_id
            db.add(
                new_movement(
                    box,
                    MovementType.TRANSFER,
                    -box.quantity,
                    actor.id,
                    reference_table="inventory_transfer",
                    reference_id=transfer.id,
                    details={"direction": "out"},
                    warehouse_id=source_warehouse,
                    location_id=source_location,
                )
            )
            box.warehouse_id = transfer.destination_warehouse_id
            box.location_id = transfer.destination_location_id
            box.status = InventoryStatus.AVAILABLE.value
            db.add(
                new_movement(
                    box,
                    MovementType.TRANSFER,
                    box.quantity,
                    actor.id,
                    reference_table="inventory_transfer",
                    reference_id=transfer.id,
                    details={"direction": "in"},
                )
            )
            await sync_batch_item(db, box)

        self._advance_transfer(transfer, TransferStatus.COMPLETED)
        await db.flush()
        await db.refresh(transfer)

        await self.notifications.notify_user(
            db,
            transfer.initiated_by,
            NotificationAction.TRANSFER_APPROVED,
            title="Transfer completed",
            message=f"Transfer #{transfer.id} was approved and the boxes moved",
            metadata={"transfer_id": transfer.id},
        )
        logger.info(
            "inventory.transfer_completed",
            transfer_id=transfer.id,
            box_count=len(boxes),
        )
        return TransferResponse.model_validate(transfer)

    async def reject_transfer(
        self,
        db: AsyncSession,
        transfer_id: int,
        reason: str,
        actor: Profile,
    ) -> TransferResponse:
        """Reject a transfer and release its boxes back to available."""
        transfer = await self._get_transfer(db, transfer_id)
        self._advance_transfer(transfer, TransferStatus.REJECTED)

        for box in await self._transfer_boxes(db, transfer.barcodes):
            if box.status == InventoryStatus.IN_TRANSIT.value:
                box.status = InventoryStatus.AVAILABLE.value
                await sync_batch_item(db, box)

        transfer.rejection_reason = reason
        transfer.approved_by = actor.id
        await db.flush()
        await db.refresh(transfer)

        await self.notifications.notify_user(
            db,
            transfer.initiated_by,
            NotificationAction.TRANSFER_REJECTED,
            title="Transfer rejected",
            message=f"Transfer #{transfer.id} was rejected: {reason}",
            metadata={"transfer_id": transfer.id},
        )
        logger.info("inventory.transfer_rejected", transfer_id=transfer.id)
        return TransferResponse.model_validate(transfer)

    async def list_transfers(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        status: TransferStatus | None = None,
        product_id: int | None = None,
    ) -> PaginatedResponse[TransferResponse]:
        stmt = select(InventoryTransfer)
        if status is not None:
            stmt = stmt.where(InventoryTransfer.status == status.value)
        if product_id is not None:
            stmt = stmt.where(InventoryTransfer.product_id == product_id)

        rows, total = await fetch_page(
            db, stmt, pagination, InventoryTransfer.created_at.desc(), InventoryTransfer.id.desc()
        )
        return paginate_response(
            [TransferResponse.model_validate(t) for t in rows], total, pagination
        )
