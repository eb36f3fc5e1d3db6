"""Stock-out workflow: requests, approval and box deduction.

Processing validates every scanned deduction before touching a row, then
deducts boxes, records details and ``out`` ledger entries, and completes the
request in one transaction.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.catalog.service import CatalogService
from wms.features.inquiries.models import (
    VALID_INQUIRY_TRANSITIONS,
    InquiryStatus,
    SalesInquiry,
)
from wms.features.inventory.models import (
    IN_STOCK_STATUSES,
    InventoryItem,
    InventoryStatus,
    MovementType,
)
from wms.features.inventory.service import new_movement, sync_batch_item
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Profile, Role
from wms.features.sales_orders.models import VALID_ORDER_TRANSITIONS, OrderStatus, SalesOrder
from wms.features.stock_out.models import (
    VALID_STOCK_OUT_TRANSITIONS,
    StockOut,
    StockOutDetail,
    StockOutStatus,
)
from wms.features.stock_out.schemas import (
    Deduction,
    StockOutCreate,
    StockOutDetailedResponse,
    StockOutProcessRequest,
    StockOutResponse,
)
from wms.shared import (
    PaginatedResponse,
    PaginationParams,
    fetch_page,
    is_valid_transition,
    paginate_response,
    validate_transition,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoxSnapshot:
    """What deduction validation needs to know about a box."""

    barcode: str
    product_id: int
    quantity: int
    status: str


def validate_deductions(
    deductions: list[Deduction],
    boxes: dict[str, BoxSnapshot],
    product_id: int,
    required_quantity: int,
) -> int:
    """Check scanned deductions against the boxes they refer to.

    Returns:
        Total quantity that will be deducted.

    Raises:
        ValidationError: Repeated, unknown or ineligible barcodes, or a
            deduction larger than its box.
        InsufficientStockError: The deductions do not cover the required quantity.
    """
    barcodes = [d.barcode for d in deductions]
    repeated = sorted({b for b in barcodes if barcodes.count(b) > 1})
    if repeated:
        raise ValidationError(
            message="Each box can only be scanned once", details={"barcodes": repeated}
        )

    missing = sorted(b for b in barcodes if b not in boxes)
    if missing:
        raise ValidationError(message="Unknown barcodes", details={"barcodes": missing})

    wrong_product = sorted(b for b in barcodes if boxes[b].product_id != product_id)
    if wrong_product:
        raise ValidationError(
            message="Boxes belong to a different product",
            details={"barcodes": wrong_product, "product_id": product_id},
        )

    unavailable = sorted(b for b in barcodes if boxes[b].status not in IN_STOCK_STATUSES)
    if unavailable:
        raise ValidationError(
            message="Boxes are not in stock", details={"barcodes": unavailable}
        )

    for deduction in deductions:
        box = boxes[deduction.barcode]
        if deduction.quantity > box.quantity:
            raise ValidationError(
                message=(
                    f"Cannot take {deduction.quantity} from box '{box.barcode}' "
                    f"holding {box.quantity}"
                ),
                details={
                    "barcode": box.barcode,
                    "requested": deduction.quantity,
                    "available": box.quantity,
                },
            )

    total = sum(d.quantity for d in deductions)
    if total < required_quantity:
        raise InsufficientStockError(
            message=f"Scanned {total} unit(s) but {required_quantity} are required",
            details={"scanned": total, "required": required_quantity},
        )
    return total


class StockOutService:
    """Manage stock-out requests from request to dispatch."""

    def __init__(self) -> None:
        self.catalog = CatalogService()
        self.notifications = NotificationService()

    async def _get(
        self,
        db: AsyncSession,
        stock_out_id: int,
        for_update: bool = False,
    ) -> StockOut:
        stmt = select(StockOut).where(StockOut.id == stock_out_id)
        if for_update:
            stmt = stmt.with_for_update()
        stock_out = (await db.execute(stmt)).scalar_one_or_none()
        if stock_out is None:
            raise NotFoundError(message=f"Stock-out not found: {stock_out_id}")
        return stock_out

    async def create_stock_out(
        self,
        db: AsyncSession,
        data: StockOutCreate,
        requester: Profile,
    ) -> StockOutResponse:
        """File a pending stock-out and notify warehouse managers."""
        product = await self.catalog.get_product_model(db, data.product_id)
        if not product.is_active:
            raise ValidationError(
                message=f"Product '{product.name}' is inactive",
                details={"product_id": product.id},
            )

        stock_out = StockOut(
            **data.model_dump(),
            status=StockOutStatus.PENDING.value,
            requested_by=requester.id,
        )
        db.add(stock_out)
        await db.flush()
        await db.refresh(stock_out)

        await self.notifications.notify_role(
            db,
            Role.WAREHOUSE_MANAGER,
            NotificationAction.STOCK_OUT_REQUESTED,
            title="New stock-out request",
            message=f"{data.quantity} unit(s) of {product.name} requested for {data.destination}",
            metadata={"stock_out_id": stock_out.id, "product_id": product.id},
        )
        logger.info(
            "stock_out.created",
            stock_out_id=stock_out.id,
            product_id=data.product_id,
            quantity=data.quantity,
            requested_by=requester.id,
        )
        return StockOutResponse.model_validate(stock_out)

    async def list_stock_outs(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        status: StockOutStatus | None = None,
        product_id: int | None = None,
        requested_by: int | None = None,
        sales_order_id: int | None = None,
        search: str | None = None,
    ) -> PaginatedResponse[StockOutResponse]:
        """List requests, newest first; ``search`` matches destination or reference."""
        stmt = select(StockOut)
        if status is not None:
            stmt = stmt.where(StockOut.status == status.value)
        if product_id is not None:
            stmt = stmt.where(StockOut.product_id == product_id)
        if requested_by is not None:
            stmt = stmt.where(StockOut.requested_by == requested_by)
        if sales_order_id is not None:
            stmt = stmt.where(StockOut.sales_order_id == sales_order_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(StockOut.destination.ilike(pattern), StockOut.reference_number.ilike(pattern))
            )

        rows, total = await fetch_page(
            db, stmt, pagination, StockOut.created_at.desc(), StockOut.id.desc()
        )
        return paginate_response(
            [StockOutResponse.model_validate(s) for s in rows], total, pagination
        )

    async def get_stock_out(self, db: AsyncSession, stock_out_id: int) -> StockOutDetailedResponse:
        stmt = (
            select(StockOut)
            .options(selectinload(StockOut.details))
            .where(StockOut.id == stock_out_id)
            .execution_options(populate_existing=True)
        )
        stock_out = (await db.execute(stmt)).scalar_one_or_none()
        if stock_out is None:
            raise NotFoundError(message=f"Stock-out not found: {stock_out_id}")
        return StockOutDetailedResponse.model_validate(stock_out)

    async def approve_stock_out(
        self,
        db: AsyncSession,
        stock_out_id: int,
        manager: Profile,
        approved_quantity: int | None = None,
    ) -> StockOutResponse:
        """Approve a pending request, optionally for a smaller quantity.

        Raises:
            ValidationError: ``approved_quantity`` exceeds the requested quantity.
        """
        stock_out = await self._get(db, stock_out_id, for_update=True)
        validate_transition(
            VALID_STOCK_OUT_TRANSITIONS,
            StockOutStatus(stock_out.status),
            StockOutStatus.APPROVED,
            "stock-out",
            stock_out_id,
        )
        if approved_quantity is not None and approved_quantity > stock_out.quantity:
            raise ValidationError(
                message=(
                    f"Approved quantity {approved_quantity} exceeds requested "
                    f"quantity {stock_out.quantity}"
                ),
                details={"approved_quantity": approved_quantity, "quantity": stock_out.quantity},
            )

        stock_out.status = StockOutStatus.APPROVED.value
        stock_out.approved_by = manager.id
        stock_out.approved_quantity = approved_quantity
        await db.flush()
        await db.refresh(stock_out)

        await self.notifications.notify_user(
            db,
            stock_out.requested_by,
            NotificationAction.STOCK_OUT_APPROVED,
            title="Stock-out approved",
            message=f"Stock-out #{stock_out.id} approved for {stock_out.required_quantity} unit(s)",
            metadata={"stock_out_id": stock_out.id},
        )
        logger.info(
            "stock_out.approved",
            stock_out_id=stock_out_id,
            approved_by=manager.id,
            approved_quantity=stock_out.required_quantity,
        )
        return StockOutResponse.model_validate(stock_out)

    async def reject_stock_out(
        self,
        db: AsyncSession,
        stock_out_id: int,
        reason: str,
        manager: Profile,
    ) -> StockOutResponse:
        stock_out = await self._get(db, stock_out_id, for_update=True)
        validate_transition(
            VALID_STOCK_OUT_TRANSITIONS,
            StockOutStatus(stock_out.status),
            StockOutStatus.REJECTED,
            "stock-out",
            stock_out_id,
        )

        stock_out.status = StockOutStatus.REJECTED.value
        stock_out.rejection_reason = reason
        stock_out.approved_by = manager.id
        await db.flush()
        await db.refresh(stock_out)

        await self.notifications.notify_user(
            db,
            stock_out.requested_by,
            NotificationAction.STOCK_OUT_REJECTED,
            title="Stock-out rejected",
            message=f"Stock-out #{stock_out.id} was rejected: {reason}",
            metadata={"stock_out_id": stock_out.id},
        )
        logger.info("stock_out.rejected", stock_out_id=stock_out_id, rejected_by=manager.id)
        return StockOutResponse.model_validate(stock_out)

    # =========================================================================
    # Processing
    # =========================================================================

    async def process_stock_out(
        self,
        db: AsyncSession,
        stock_out_id: int,
        request: StockOutProcessRequest,
        manager: Profile,
    ) -> StockOutDetailedResponse:
        """Deduct scanned boxes and complete an approved stock-out.

        Raises:
            InvalidTransitionError: Stock-out is not approved or processing.
            ValidationError: A deduction is invalid (see ``validate_deductions``).
            InsufficientStockError: Deductions do not cover the required quantity.
        """
        stock_out = await self._get(db, stock_out_id, for_update=True)
        validate_transition(
            VALID_STOCK_OUT_TRANSITIONS,
            StockOutStatus(stock_out.status),
            StockOutStatus.COMPLETED,
            "stock-out",
            stock_out_id,
        )

        barcodes = [d.barcode for d in request.deductions]
        stmt = (
            select(InventoryItem)
            .where(InventoryItem.barcode.in_(barcodes))
            .order_by(InventoryItem.barcode)
            .with_for_update()
        )
        items = {i.barcode: i for i in (await db.execute(stmt)).scalars().all()}
        snapshots = {
            b: BoxSnapshot(b, i.product_id, i.quantity, i.status) for b, i in items.items()
        }
        total = validate_deductions(
            request.deductions, snapshots, stock_out.product_id, stock_out.required_quantity
        )

        for deduction in request.deductions:
            item = items[deduction.barcode]
            item.quantity -= deduction.quantity
            if item.quantity == 0:
                item.status = InventoryStatus.SOLD.value
            db.add(
                StockOutDetail(
                    stock_out_id=stock_out.id,
                    inventory_id=item.id,
                    barcode=item.barcode,
                    quantity=deduction.quantity,
                    processed_by=manager.id,
                )
            )
            db.add(
                new_movement(
                    item,
                    MovementType.OUT,
                    -deduction.quantity,
                    manager.id,
                    reference_table="stock_out",
                    reference_id=stock_out.id,
                    details={"destination": stock_out.destination},
                )
            )
            await sync_batch_item(db, item)

        stock_out.status = StockOutStatus.COMPLETED.value
        stock_out.processed_by = manager.id
        stock_out.processed_at = datetime.now(UTC)
        if request.invoice_number:
            stock_out.invoice_number = request.invoice_number
        if request.packing_slip_number:
            stock_out.packing_slip_number = request.packing_slip_number
        await db.flush()

        if stock_out.sales_order_id is not None:
            await self._dispatch_order(db, stock_out.sales_order_id)

        await self.notifications.notify_user(
            db,
            stock_out.requested_by,
            NotificationAction.STOCK_OUT_COMPLETED,
            title="Stock-out completed",
            message=(
                f"Stock-out #{stock_out.id} dispatched {total} unit(s) "
                f"to {stock_out.destination}"
            ),
            metadata={"stock_out_id": stock_out.id},
        )
        logger.info(
            "stock_out.processed",
            stock_out_id=stock_out_id,
            box_count=len(request.deductions),
            quantity=total,
            processed_by=manager.id,
        )
        return await self.get_stock_out(db, stock_out_id)

    async def _dispatch_order(self, db: AsyncSession, sales_order_id: int) -> None:
        """Mark an order dispatched once all its stock-outs are completed.

        The order's inquiry, if any, becomes ``completed`` at the same time.
        """
        open_count = (
            await db.execute(
                select(func.count(StockOut.id)).where(
                    StockOut.sales_order_id == sales_order_id,
                    StockOut.status.notin_(
                        [StockOutStatus.COMPLETED.value, StockOutStatus.REJECTED.value]
                    ),
                )
            )
        ).scalar_one()
        if open_count:
            return

        order = await db.get(SalesOrder, sales_order_id, with_for_update=True)
        if order is None:
            return
        if not is_valid_transition(
            VALID_ORDER_TRANSITIONS, OrderStatus(order.status), OrderStatus.DISPATCHED
        ):
            logger.warning(
                "stock_out.order_not_dispatchable",
                sales_order_id=sales_order_id,
                status=order.status,
            )
            return
        order.status = OrderStatus.DISPATCHED.value

        if order.inquiry_id is not None:
            inquiry = await db.get(SalesInquiry, order.inquiry_id)
            if inquiry is not None and is_valid_transition(
                VALID_INQUIRY_TRANSITIONS, InquiryStatus(inquiry.status), InquiryStatus.COMPLETED
            ):
                inquiry.status = InquiryStatus.COMPLETED.value
        await db.flush()

        await self.notifications.notify_role(
            db,
            Role.SALES_OPERATOR,
            NotificationAction.ORDER_STATUS_CHANGED,
            title="Order dispatched",
            message=f"Order {order.sales_order_number} has been dispatched",
            metadata={"sales_order_id": order.id},
        )
        logger.info(
            "stock_out.order_dispatched",
            sales_order_id=sales_order_id,
            inquiry_id=order.inquiry_id,
        )
