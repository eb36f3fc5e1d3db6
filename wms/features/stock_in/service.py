"""Stock-in workflow: submission, approval and batch processing.

Processing is atomic: batches, boxes, inventory rows and ledger entries are
written in the request transaction. If anything fails the transaction is
rolled back and the stock-in is marked ``failed`` in a separate session so
the error survives the rollback and the request can be retried.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.config import get_settings
from wms.core.database import transaction
from wms.core.exceptions import ConflictError, NotFoundError, ValidationError, WMSError
from wms.core.logging import get_logger
from wms.features.batches.barcodes import barcode_stem, box_barcodes, find_duplicates
from wms.features.batches.models import BatchItem, BatchStatus, ProcessedBatch
from wms.features.catalog.service import CatalogService
from wms.features.inventory.models import InventoryItem, InventoryStatus, MovementType
from wms.features.inventory.service import existing_barcodes, new_movement
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Profile, Role
from wms.features.stock_in.models import (
    VALID_STOCK_IN_TRANSITIONS,
    StockIn,
    StockInStatus,
)
from wms.features.stock_in.schemas import (
    BatchInput,
    ProcessedBatchSummary,
    StockInCreate,
    StockInProcessRequest,
    StockInProcessResponse,
    StockInResponse,
)
from wms.features.warehouses.service import WarehouseService
from wms.shared import (
    PaginatedResponse,
    PaginationParams,
    fetch_page,
    paginate_response,
    validate_transition,
)

logger = get_logger(__name__)


@dataclass
class PlannedBox:
    barcode: str
    quantity: int
    color: str | None = None
    size: str | None = None


@dataclass
class PlannedBatch:
    """A batch expanded into concrete boxes before anything is written."""

    sequence: int
    warehouse_id: int
    location_id: int
    boxes: list[PlannedBox] = field(default_factory=list)

    @property
    def total_quantity(self) -> int:
        return sum(box.quantity for box in self.boxes)


def batch_number_for(stock_in_id: int, sequence: int) -> str:
    """Batch number: stock-in id and the batch's 1-based position."""
    return f"BATCH-{stock_in_id:06d}-{sequence:02d}"


def plan_batch(
    batch: BatchInput,
    sequence: int,
    stock_in_id: int,
    *,
    prefix: str,
    suffix_width: int,
    default_box_count: int,
) -> PlannedBatch:
    """Expand one batch request into boxes with barcodes."""
    planned = PlannedBatch(
        sequence=sequence,
        warehouse_id=batch.warehouse_id,
        location_id=batch.location_id,
    )

    if batch.boxes is not None:
        planned.boxes = [
            PlannedBox(
                barcode=box.barcode,
                quantity=box.quantity,
                color=box.color or batch.color,
                size=box.size or batch.size,
            )
            for box in batch.boxes
        ]
        return planned

    box_count = batch.box_count or default_box_count
    stem = barcode_stem(
        batch.base_barcode,
        prefix=prefix,
        stock_in_id=stock_in_id,
        batch_sequence=sequence,
    )
    # quantity_per_box is guaranteed by BatchInput validation when boxes is None
    quantity = batch.quantity_per_box or 0
    planned.boxes = [
        PlannedBox(barcode=code, quantity=quantity, color=batch.color, size=batch.size)
        for code in box_barcodes(stem, box_count, suffix_width)
    ]
    return planned


class StockInService:
    """Manage stock-in requests from submission to inventory."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.catalog = CatalogService()
        self.warehouses = WarehouseService()
        self.notifications = NotificationService()

    async def _get(
        self,
        db: AsyncSession,
        stock_in_id: int,
        for_update: bool = False,
    ) -> StockIn:
        stmt = select(StockIn).where(StockIn.id == stock_in_id)
        if for_update:
            stmt = stmt.with_for_update()
        stock_in = (await db.execute(stmt)).scalar_one_or_none()
        if stock_in is None:
            raise NotFoundError(message=f"Stock-in not found: {stock_in_id}")
        return stock_in

    async def submit_stock_in(
        self,
        db: AsyncSession,
        data: StockInCreate,
        submitter: Profile,
    ) -> StockInResponse:
        """File a pending stock-in and notify warehouse managers.

        Raises:
            ValidationError: If the product is inactive.
        """
        product = await self.catalog.get_product_model(db, data.product_id)
        if not product.is_active:
            raise ValidationError(
                message=f"Product '{product.name}' is inactive",
                details={"product_id": product.id},
            )

        stock_in = StockIn(
            product_id=data.product_id,
            boxes=data.boxes,
            source=data.source,
            notes=data.notes,
            status=StockInStatus.PENDING.value,
            submitted_by=submitter.id,
        )
        db.add(stock_in)
        await db.flush()
        await db.refresh(stock_in)

        await self.notifications.notify_role(
            db,
            Role.WAREHOUSE_MANAGER,
            NotificationAction.STOCK_IN_SUBMITTED,
            title="New stock-in request",
            message=f"{data.boxes} box(es) of {product.name} submitted for approval",
            metadata={"stock_in_id": stock_in.id, "product_id": product.id},
        )

        logger.info(
            "stock_in.submitted",
            stock_in_id=stock_in.id,
            product_id=data.product_id,
            boxes=data.boxes,
            submitted_by=submitter.id,
        )
        return StockInResponse.model_validate(stock_in)

    async def list_stock_ins(
        self,
        db: AsyncSession,
        profile: Profile,
        pagination: PaginationParams,
        status: StockInStatus | None = None,
        product_id: int | None = None,
        submitted_by: int | None = None,
    ) -> PaginatedResponse[StockInResponse]:
        """List requests, newest first. Field operators only see their own."""
        stmt = select(StockIn)
        if profile.role == Role.FIELD_OPERATOR.value:
            stmt = stmt.where(StockIn.submitted_by == profile.id)
        elif submitted_by is not None:
            stmt = stmt.where(StockIn.submitted_by == submitted_by)
        if status is not None:
            stmt = stmt.where(StockIn.status == status.value)
        if product_id is not None:
            stmt = stmt.where(StockIn.product_id == product_id)

        rows, total = await fetch_page(
            db, stmt, pagination, StockIn.created_at.desc(), StockIn.id.desc()
        )
        return paginate_response(
            [StockInResponse.model_validate(s) for s in rows], total, pagination
        )

    async def get_stock_in(
        self,
        db: AsyncSession,
        stock_in_id: int,
        profile: Profile,
    ) -> StockInResponse:
        stock_in = await self._get(db, stock_in_id)
        if profile.role == Role.FIELD_OPERATOR.value and stock_in.submitted_by != profile.id:
            raise NotFoundError(message=f"Stock-in not found: {stock_in_id}")
        return StockInResponse.model_validate(stock_in)

    async def approve_stock_in(
        self,
        db: AsyncSession,
        stock_in_id: int,
        manager: Profile,
    ) -> StockInResponse:
        """Approve a pending request so it can be processed."""
        stock_in = await self._get(db, stock_in_id, for_update=True)
        validate_transition(
            VALID_STOCK_IN_TRANSITIONS,
            StockInStatus(stock_in.status),
            StockInStatus.APPROVED,
            "stock-in",
            stock_in_id,
        )

        stock_in.status = StockInStatus.APPROVED.value
        stock_in.processed_by = manager.id
        await db.flush()
        await db.refresh(stock_in)

        await self.notifications.notify_user(
            db,
            stock_in.submitted_by,
            NotificationAction.STOCK_IN_APPROVED,
            title="Stock-in approved",
            message=f"Stock-in #{stock_in.id} was approved",
            metadata={"stock_in_id": stock_in.id},
        )
        logger.info("stock_in.approved", stock_in_id=stock_in_id, approved_by=manager.id)
        return StockInResponse.model_validate(stock_in)

    async def reject_stock_in(
        self,
        db: AsyncSession,
        stock_in_id: int,
        reason: str,
        manager: Profile,
    ) -> StockInResponse:
        """Reject a pending request with a reason and tell the submitter."""
        stock_in = await self._get(db, stock_in_id, for_update=True)
        validate_transition(
            VALID_STOCK_IN_TRANSITIONS,
            StockInStatus(stock_in.status),
            StockInStatus.REJECTED,
            "stock-in",
            stock_in_id,
        )

        stock_in.status = StockInStatus.REJECTED.value
        stock_in.rejection_reason = reason
        stock_in.processed_by = manager.id
        await db.flush()
        await db.refresh(stock_in)

        await self.notifications.notify_user(
            db,
            stock_in.submitted_by,
            NotificationAction.STOCK_IN_REJECTED,
            title="Stock-in rejected",
            message=f"Stock-in #{stock_in.id} was rejected: {reason}",
            metadata={"stock_in_id": stock_in.id, "reason": reason},
        )
        logger.info("stock_in.rejected", stock_in_id=stock_in_id, rejected_by=manager.id)
        return StockInResponse.model_validate(stock_in)

    # =========================================================================
    # Processing
    # =========================================================================

    async def process_stock_in(
        self,
        db: AsyncSession,
        stock_in_id: int,
        request: StockInProcessRequest,
        manager: Profile,
    ) -> StockInProcessResponse:
        """Turn an approved (or failed) stock-in into batches and inventory.

        Raises:
            InvalidTransitionError: Stock-in is not approved or failed.
            ValidationError: Bad batch input (location, box limits).
            ConflictError: Duplicate barcodes.
        """
        stock_in = await self._get(db, stock_in_id, for_update=True)
        validate_transition(
            VALID_STOCK_IN_TRANSITIONS,
            StockInStatus(stock_in.status),
            StockInStatus.PROCESSING,
            "stock-in",
            stock_in_id,
        )
        submitted_by = stock_in.submitted_by

        try:
            result = await self._process(db, stock_in, request, manager)
        except (WMSError, SQLAlchemyError) as e:
            message = e.message if isinstance(e, WMSError) else "Database error during processing"
            logger.error(
                "stock_in.processing_failed",
                stock_in_id=stock_in_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            await db.rollback()
            try:
                await self._mark_failed(stock_in_id, submitted_by, message)
            except SQLAlchemyError:
                logger.error(
                    "stock_in.mark_failed_error", stock_in_id=stock_in_id, exc_info=True
                )
            raise

        await self.notifications.notify_user(
            db,
            submitted_by,
            NotificationAction.STOCK_IN_COMPLETED,
            title="Stock-in completed",
            message=(
                f"Stock-in #{stock_in_id} processed: {result.total_boxes} box(es), "
                f"{result.total_quantity} unit(s)"
            ),
            metadata={"stock_in_id": stock_in_id},
        )
        return result

    async def _process(
        self,
        db: AsyncSession,
        stock_in: StockIn,
        request: StockInProcessRequest,
        manager: Profile,
    ) -> StockInProcessResponse:
        stock_in.status = StockInStatus.PROCESSING.value
        stock_in.processed_by = manager.id
        stock_in.processing_started_at = datetime.now(UTC)
        stock_in.error_message = None
        await db.flush()

        logger.info(
            "stock_in.processing_started",
            stock_in_id=stock_in.id,
            batch_count=len(request.batches),
        )

        plans = [
            plan_batch(
                batch,
                sequence,
                stock_in.id,
                prefix=self.settings.barcode_prefix,
                suffix_width=self.settings.barcode_box_suffix_width,
                default_box_count=self.settings.stock_in_default_box_count,
            )
            for sequence, batch in enumerate(request.batches, start=1)
        ]
        await self._validate_plans(db, plans)

        summaries = []
        for plan in plans:
            summaries.append(
                await self._write_batch(db, stock_in, plan, manager, request.notes)
            )

        stock_in.status = StockInStatus.COMPLETED.value
        stock_in.processing_completed_at = datetime.now(UTC)
        await db.flush()
        await db.refresh(stock_in)

        total_boxes = sum(s.total_boxes for s in summaries)
        total_quantity = sum(s.total_quantity for s in summaries)
        logger.info(
            "stock_in.processing_completed",
            stock_in_id=stock_in.id,
            batch_count=len(summaries),
            total_boxes=total_boxes,
            total_quantity=total_quantity,
        )
        return StockInProcessResponse(
            stock_in=StockInResponse.model_validate(stock_in),
            batches=summaries,
            total_boxes=total_boxes,
            total_quantity=total_quantity,
        )

    async def _validate_plans(self, db: AsyncSession, plans: list[PlannedBatch]) -> None:
        for plan in plans:
            await self.warehouses.get_location(db, plan.warehouse_id, plan.location_id)
            for box in plan.boxes:
                if box.quantity <= 0:
                    raise ValidationError(
                        message=f"Box {box.barcode} must hold a positive quantity"
                    )

        total_boxes = sum(len(plan.boxes) for plan in plans)
        if total_boxes > self.settings.stock_in_max_boxes_per_batch:
            raise ValidationError(
                message=(
                    f"{total_boxes} boxes exceeds the limit of "
                    f"{self.settings.stock_in_max_boxes_per_batch} per request"
                ),
                details={"total_boxes": total_boxes},
            )

        barcodes = [box.barcode for plan in plans for box in plan.boxes]
        duplicates = find_duplicates(barcodes)
        if duplicates:
            raise ConflictError(
                message="Barcodes repeated within the request",
                details={"barcodes": duplicates[:50]},
            )

        taken = await existing_barcodes(db, barcodes)
        if taken:
            raise ConflictError(
                message="Barcodes already exist in inventory",
                details={"barcodes": taken[:50]},
            )

    async def _write_batch(
        self,
        db: AsyncSession,
        stock_in: StockIn,
        plan: PlannedBatch,
        manager: Profile,
        notes: str | None,
    ) -> ProcessedBatchSummary:
        batch = ProcessedBatch(
            batch_number=batch_number_for(stock_in.id, plan.sequence),
            stock_in_id=stock_in.id,
            product_id=stock_in.product_id,
            warehouse_id=plan.warehouse_id,
            location_id=plan.location_id,
            total_boxes=len(plan.boxes),
            total_quantity=plan.total_quantity,
            status=BatchStatus.PROCESSING.value,
            processed_by=manager.id,
            source=stock_in.source,
            notes=notes,
        )
        db.add(batch)
        await db.flush()

        items = []
        for box in plan.boxes:
            db.add(
                BatchItem(
                    batch_id=batch.id,
                    barcode=box.barcode,
                    quantity=box.quantity,
                    color=box.color,
                    size=box.size,
                    warehouse_id=plan.warehouse_id,
                    location_id=plan.location_id,
                    status=InventoryStatus.AVAILABLE.value,
                )
            )
            item = InventoryItem(
                product_id=stock_in.product_id,
                warehouse_id=plan.warehouse_id,
                location_id=plan.location_id,
                batch_id=batch.id,
                barcode=box.barcode,
                quantity=box.quantity,
                color=box.color,
                size=box.size,
                status=InventoryStatus.AVAILABLE.value,
            )
            db.add(item)
            items.append(item)
        await db.flush()

        for item in items:
            db.add(
                new_movement(
                    item,
                    MovementType.IN,
                    item.quantity,
                    manager.id,
                    reference_table="stock_in",
                    reference_id=stock_in.id,
                    details={"batch_number": batch.batch_number},
                )
            )

        batch.status = BatchStatus.COMPLETED.value
        await db.flush()

        logger.info(
            "batches.batch_processed",
            stock_in_id=stock_in.id,
            batch_id=batch.id,
            batch_number=batch.batch_number,
            total_boxes=batch.total_boxes,
            total_quantity=batch.total_quantity,
        )
        return ProcessedBatchSummary(
            id=batch.id,
            batch_number=batch.batch_number,
            warehouse_id=plan.warehouse_id,
            location_id=plan.location_id,
            total_boxes=batch.total_boxes,
            total_quantity=batch.total_quantity,
            barcodes=[box.barcode for box in plan.boxes],
        )

    async def _mark_failed(self, stock_in_id: int, submitted_by: int, message: str) -> None:
        """Record a processing failure in its own committed transaction."""
        async with transaction() as session:
            stock_in = await session.get(StockIn, stock_in_id)
            if stock_in is None:
                return
            stock_in.status = StockInStatus.FAILED.value
            stock_in.error_message = message[:2000]
            stock_in.processing_completed_at = None
            await self.notifications.notify_user(
                session,
                submitted_by,
                NotificationAction.STOCK_IN_FAILED,
                title="Stock-in processing failed",
                message=f"Stock-in #{stock_in_id} could not be processed: {message}",
                metadata={"stock_in_id": stock_in_id},
            )

        logger.warning("stock_in.marked_failed", stock_in_id=stock_in_id, error=message)
