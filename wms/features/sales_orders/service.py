"""Sales orders: creation, status tracking and hand-off to stock-out."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.catalog.service import CatalogService
from wms.features.inquiries.models import SalesInquiry
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Profile, Role
from wms.features.sales_orders.models import (
    VALID_ORDER_TRANSITIONS,
    OrderStatus,
    SalesOrder,
    SalesOrderItem,
)
from wms.features.sales_orders.schemas import (
    OrderCreate,
    OrderResponse,
    OrderTotals,
    PushToStockOutResponse,
)
from wms.features.stock_out.models import StockOut, StockOutStatus
from wms.features.stock_out.schemas import StockOutResponse
from wms.shared import (
    PaginatedResponse,
    PaginationParams,
    fetch_page,
    paginate_response,
    validate_transition,
)

logger = get_logger(__name__)

CENTS = Decimal("0.01")

# First key of the (namespace, yyyymmdd) advisory lock guarding daily numbering
ORDER_NUMBER_LOCK = 5301


def format_order_number(day: date, sequence: int) -> str:
    """``SO-YYYYMMDD-NNNN`` with a 1-based daily sequence."""
    return f"SO-{day:%Y%m%d}-{sequence:04d}"


def order_total(lines: Iterable[tuple[int, Decimal]]) -> Decimal:
    """Sum of quantity x unit price, rounded to cents."""
    total = sum((Decimal(qty) * price for qty, price in lines), Decimal("0"))
    return total.quantize(CENTS)


class SalesOrderService:
    """Create and track sales orders."""

    def __init__(self) -> None:
        self.catalog = CatalogService()
        self.notifications = NotificationService()

    async def _get(
        self,
        db: AsyncSession,
        order_id: int,
        for_update: bool = False,
    ) -> SalesOrder:
        stmt = (
            select(SalesOrder)
            .options(selectinload(SalesOrder.items))
            .where(SalesOrder.id == order_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        order = (await db.execute(stmt)).scalar_one_or_none()
        if order is None:
            raise NotFoundError(message=f"Sales order not found: {order_id}")
        return order

    async def next_order_number(self, db: AsyncSession, day: date) -> str:
        """Next free number for ``day``.

        A transaction-scoped advisory lock on the day is held until commit,
        so concurrent orders for the same day draw numbers one at a time.
        """
        await db.execute(
            select(func.pg_advisory_xact_lock(ORDER_NUMBER_LOCK, int(f"{day:%Y%m%d}")))
        )
        prefix = f"SO-{day:%Y%m%d}-"
        stmt = select(func.max(SalesOrder.sales_order_number)).where(
            SalesOrder.sales_order_number.like(f"{prefix}%")
        )
        latest = (await db.execute(stmt)).scalar_one()
        sequence = int(latest.removeprefix(prefix)) + 1 if latest else 1
        return format_order_number(day, sequence)

    async def create_order(
        self,
        db: AsyncSession,
        data: OrderCreate,
        creator: Profile,
    ) -> OrderResponse:
        """Create a pending order with its lines.

        Raises:
            ValidationError: Unknown or inactive products.
            NotFoundError: ``inquiry_id`` does not exist.
        """
        await self.catalog.active_products(db, [item.product_id for item in data.items])
        if data.inquiry_id is not None and await db.get(SalesInquiry, data.inquiry_id) is None:
            raise NotFoundError(message=f"Inquiry not found: {data.inquiry_id}")

        order_date = data.order_date or date.today()
        order = SalesOrder(
            sales_order_number=await self.next_order_number(db, order_date),
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_company=data.customer_company,
            customer_phone=data.customer_phone,
            inquiry_id=data.inquiry_id,
            status=OrderStatus.PENDING.value,
            order_date=order_date,
            total_amount=order_total((i.quantity, i.unit_price) for i in data.items),
            pushed_to_stockout=False,
            created_by=creator.id,
            items=[
                SalesOrderItem(
                    product_id=i.product_id,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    requirements=i.requirements,
                )
                for i in data.items
            ],
        )
        db.add(order)
        await db.flush()

        await self.notifications.notify_role(
            db,
            Role.SALES_OPERATOR,
            NotificationAction.ORDER_CREATED,
            title="Sales order created",
            message=f"Order {order.sales_order_number} for {order.customer_name}",
            metadata={"sales_order_id": order.id},
        )
        logger.info(
            "sales_orders.created",
            sales_order_id=order.id,
            sales_order_number=order.sales_order_number,
            line_count=len(data.items),
            total_amount=str(order.total_amount),
        )
        return OrderResponse.model_validate(await self._get(db, order.id))

    async def list_orders(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        status: OrderStatus | None = None,
        search: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> PaginatedResponse[OrderResponse]:
        """List orders, newest first; ``search`` matches number, name or company."""
        if date_from and date_to and date_to < date_from:
            raise ValidationError(message="date_to must be on or after date_from")

        stmt = select(SalesOrder).options(selectinload(SalesOrder.items))
        if status is not None:
            stmt = stmt.where(SalesOrder.status == status.value)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    SalesOrder.sales_order_number.ilike(pattern),
                    SalesOrder.customer_name.ilike(pattern),
                    SalesOrder.customer_company.ilike(pattern),
                )
            )
        if date_from is not None:
            stmt = stmt.where(SalesOrder.order_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(SalesOrder.order_date <= date_to)

        rows, total = await fetch_page(
            db, stmt, pagination, SalesOrder.created_at.desc(), SalesOrder.id.desc()
        )
        return paginate_response(
            [OrderResponse.model_validate(o) for o in rows], total, pagination
        )

    async def get_order(self, db: AsyncSession, order_id: int) -> OrderResponse:
        return OrderResponse.model_validate(await self._get(db, order_id))

    async def update_status(
        self,
        db: AsyncSession,
        order_id: int,
        new_status: OrderStatus,
        actor: Profile,
    ) -> OrderResponse:
        """Move an order along its lifecycle."""
        order = await self._get(db, order_id, for_update=True)
        previous = OrderStatus(order.status)
        validate_transition(VALID_ORDER_TRANSITIONS, previous, new_status, "sales order", order_id)

        order.status = new_status.value
        await db.flush()

        if order.created_by is not None and order.created_by != actor.id:
            await self.notifications.notify_user(
                db,
                order.created_by,
                NotificationAction.ORDER_STATUS_CHANGED,
                title="Order status changed",
                message=f"Order {order.sales_order_number} is now {new_status.value}",
                metadata={"sales_order_id": order.id, "status": new_status.value},
            )
        logger.info(
            "sales_orders.status_changed",
            sales_order_id=order_id,
            previous_status=previous.value,
            new_status=new_status.value,
            changed_by=actor.id,
        )
        return OrderResponse.model_validate(await self._get(db, order_id))

    async def order_totals(self, db: AsyncSession, order_id: int) -> OrderTotals:
        order = await self._get(db, order_id)
        return OrderTotals(
            order_id=order.id,
            line_count=len(order.items),
            total_quantity=sum(i.quantity for i in order.items),
            total_amount=order_total((i.quantity, i.unit_price) for i in order.items),
        )

    async def push_to_stock_out(
        self,
        db: AsyncSession,
        order_id: int,
        actor: Profile,
    ) -> PushToStockOutResponse:
        """Create one pending stock-out per order line.

        A confirmed order moves to ``processing``. The stock-outs carry the
        order number as reference so processing them can dispatch the order.

        Raises:
            ConflictError: The order was already pushed.
            InvalidTransitionError: The order is not confirmed.
        """
        order = await self._get(db, order_id, for_update=True)
        if order.pushed_to_stockout:
            raise ConflictError(
                message=f"Order {order.sales_order_number} was already pushed to stock-out",
                details={"sales_order_id": order.id},
            )
        validate_transition(
            VALID_ORDER_TRANSITIONS,
            OrderStatus(order.status),
            OrderStatus.PROCESSING,
            "sales order",
            order_id,
        )

        destination = order.customer_company or order.customer_name
        stock_outs = [
            StockOut(
                product_id=item.product_id,
                quantity=item.quantity,
                destination=destination,
                reason=item.requirements or f"Sales order {order.sales_order_number}",
                status=StockOutStatus.PENDING.value,
                requested_by=actor.id,
                reference_number=order.sales_order_number,
                sales_order_id=order.id,
            )
            for item in order.items
        ]
        db.add_all(stock_outs)
        order.pushed_to_stockout = True
        order.status = OrderStatus.PROCESSING.value
        await db.flush()
        for stock_out in stock_outs:
            await db.refresh(stock_out)

        await self.notifications.notify_role(
            db,
            Role.WAREHOUSE_MANAGER,
            NotificationAction.STOCK_OUT_REQUESTED,
            title="Stock-out requested for order",
            message=(
                f"{len(stock_outs)} stock-out request(s) created for order "
                f"{order.sales_order_number}"
            ),
            metadata={
                "sales_order_id": order.id,
                "stock_out_ids": [s.id for s in stock_outs],
            },
        )
        logger.info(
            "sales_orders.pushed_to_stock_out",
            sales_order_id=order.id,
            stock_out_count=len(stock_outs),
        )
        return PushToStockOutResponse(
            order=OrderResponse.model_validate(await self._get(db, order_id)),
            stock_outs=[StockOutResponse.model_validate(s) for s in stock_outs],
        )
