"""Role dashboards and downloadable reports.

Dashboards are small aggregate queries run on demand. Reports return rows
that the routes serve as JSON or, through pandas, as CSV.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

import pandas as pd
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, selectinload

from wms.core.config import get_settings
from wms.core.exceptions import ValidationError
from wms.core.logging import get_logger
from wms.features.batches.models import BatchItem, ProcessedBatch
from wms.features.batches.schemas import BatchResponse
from wms.features.catalog.models import Product
from wms.features.dashboards.schemas import (
    AdminDashboard,
    BatchTrackingRow,
    CustomerDashboard,
    InventoryStatusRow,
    ManagerDashboard,
    MovementReportRow,
    OperatorDashboard,
    SalesDashboard,
)
from wms.features.inquiries.models import InquiryStatus, SalesInquiry
from wms.features.inquiries.schemas import InquiryResponse
from wms.features.inventory.models import (
    IN_STOCK_STATUSES,
    InventoryItem,
    InventoryMovement,
    InventoryTransfer,
    MovementStatus,
    TransferStatus,
)
from wms.features.inventory.schemas import MovementResponse
from wms.features.inventory.service import SCAN_EVENT
from wms.features.profiles.models import Profile
from wms.features.sales_orders.models import OrderStatus, SalesOrder
from wms.features.stock_in.models import StockIn, StockInStatus
from wms.features.stock_in.schemas import StockInResponse
from wms.features.stock_out.models import StockOut, StockOutDetail, StockOutStatus
from wms.features.warehouses.models import Warehouse

logger = get_logger(__name__)


def fill_status_counts(
    statuses: type[Enum],
    rows: Sequence[tuple[str, int]],
) -> dict[str, int]:
    """Counts per status value, with zero for statuses that have no rows."""
    counts = {s.value: 0 for s in statuses}
    for status, count in rows:
        counts[status] = int(count)
    return counts


def rows_to_csv(rows: Sequence[BaseModel], model: type[BaseModel]) -> str:
    """Serialize report rows to CSV with one column per model field."""
    columns = list(model.model_fields)
    frame = pd.DataFrame([row.model_dump(mode="json") for row in rows], columns=columns)
    return frame.to_csv(index=False)


def resolve_range(
    date_from: date | None,
    date_to: date | None,
    max_days: int,
    default_days: int = 30,
) -> tuple[date, date]:
    """Apply defaults to a report date range and check its bounds.

    Raises:
        ValidationError: Reversed range or a range longer than ``max_days``.
    """
    end = date_to or date.today()
    start = date_from or end - timedelta(days=default_days - 1)
    if end < start:
        raise ValidationError(message="date_to must be on or after date_from")
    if (end - start).days + 1 > max_days:
        raise ValidationError(
            message=f"Date range cannot exceed {max_days} days",
            details={"date_from": str(start), "date_to": str(end), "max_days": max_days},
        )
    return start, end


class DashboardService:
    """Aggregate data for the role dashboards and reports."""

    def __init__(self) -> None:
        self.settings = get_settings()

    async def _count(
        self,
        db: AsyncSession,
        column: InstrumentedAttribute[Any],
        *where: Any,
    ) -> int:
        stmt = select(func.count(column))
        if where:
            stmt = stmt.where(*where)
        return int((await db.execute(stmt)).scalar_one())

    async def _by_status(
        self,
        db: AsyncSession,
        statuses: type[Enum],
        status_column: InstrumentedAttribute[str],
        *where: Any,
    ) -> dict[str, int]:
        stmt = select(status_column, func.count()).group_by(status_column)
        if where:
            stmt = stmt.where(*where)
        rows = (await db.execute(stmt)).all()
        return fill_status_counts(statuses, [(s, c) for s, c in rows])

    # =========================================================================
    # Dashboards
    # =========================================================================

    async def admin_dashboard(self, db: AsyncSession) -> AdminDashboard:
        boxes, units = (
            await db.execute(
                select(
                    func.count(InventoryItem.id),
                    func.coalesce(func.sum(InventoryItem.quantity), 0),
                ).where(InventoryItem.status.in_(IN_STOCK_STATUSES))
            )
        ).one()

        recent = (
            await db.execute(
                select(InventoryMovement)
                .where(
                    InventoryMovement.details["event_type"].astext.is_distinct_from(SCAN_EVENT)
                )
                .order_by(InventoryMovement.created_at.desc(), InventoryMovement.id.desc())
                .limit(self.settings.recent_activity_limit)
            )
        ).scalars().all()

        return AdminDashboard(
            total_products=await self._count(db, Product.id, Product.is_active.is_(True)),
            total_warehouses=await self._count(db, Warehouse.id),
            active_profiles=await self._count(db, Profile.id, Profile.active.is_(True)),
            inventory_boxes=int(boxes),
            inventory_units=int(units),
            pending_stock_ins=await self._count(
                db, StockIn.id, StockIn.status == StockInStatus.PENDING.value
            ),
            pending_stock_outs=await self._count(
                db, StockOut.id, StockOut.status == StockOutStatus.PENDING.value
            ),
            open_inquiries=await self._count(
                db,
                SalesInquiry.id,
                SalesInquiry.status.in_(
                    [InquiryStatus.NEW.value, InquiryStatus.IN_PROGRESS.value]
                ),
            ),
            recent_movements=[MovementResponse.model_validate(m) for m in recent],
        )

    async def manager_dashboard(self, db: AsyncSession) -> ManagerDashboard:
        stock_ins = await self._by_status(db, StockInStatus, StockIn.status)
        batches = (
            await db.execute(
                select(ProcessedBatch)
                .order_by(ProcessedBatch.processed_at.desc(), ProcessedBatch.id.desc())
                .limit(self.settings.recent_activity_limit)
            )
        ).scalars().all()

        return ManagerDashboard(
            pending_stock_ins=stock_ins[StockInStatus.PENDING.value],
            approved_stock_ins=stock_ins[StockInStatus.APPROVED.value],
            processing_stock_ins=stock_ins[StockInStatus.PROCESSING.value],
            pending_stock_outs=await self._count(
                db, StockOut.id, StockOut.status == StockOutStatus.PENDING.value
            ),
            pending_transfers=await self._count(
                db,
                InventoryTransfer.id,
                InventoryTransfer.status == TransferStatus.PENDING.value,
            ),
            recent_batches=[BatchResponse.model_validate(b) for b in batches],
        )

    async def operator_dashboard(self, db: AsyncSession, profile: Profile) -> OperatorDashboard:
        recent = (
            await db.execute(
                select(StockIn)
                .where(StockIn.submitted_by == profile.id)
                .order_by(StockIn.created_at.desc(), StockIn.id.desc())
                .limit(self.settings.recent_activity_limit)
            )
        ).scalars().all()

        return OperatorDashboard(
            stock_ins_by_status=await self._by_status(
                db, StockInStatus, StockIn.status, StockIn.submitted_by == profile.id
            ),
            transfers_by_status=await self._by_status(
                db,
                TransferStatus,
                InventoryTransfer.status,
                InventoryTransfer.initiated_by == profile.id,
            ),
            recent_stock_ins=[StockInResponse.model_validate(s) for s in recent],
        )

    async def sales_dashboard(self, db: AsyncSession) -> SalesDashboard:
        order_value = (
            await db.execute(
                select(func.coalesce(func.sum(SalesOrder.total_amount), 0)).where(
                    SalesOrder.status != OrderStatus.CANCELLED.value
                )
            )
        ).scalar_one()

        return SalesDashboard(
            inquiries_by_status=await self._by_status(db, InquiryStatus, SalesInquiry.status),
            orders_by_status=await self._by_status(db, OrderStatus, SalesOrder.status),
            order_value=Decimal(str(order_value)),
        )

    async def customer_dashboard(self, db: AsyncSession, profile: Profile) -> CustomerDashboard:
        mine = SalesInquiry.customer_profile_id == profile.id
        recent = (
            await db.execute(
                select(SalesInquiry)
                .options(selectinload(SalesInquiry.items))
                .where(mine)
                .order_by(SalesInquiry.created_at.desc(), SalesInquiry.id.desc())
                .limit(self.settings.recent_activity_limit)
            )
        ).scalars().all()

        return CustomerDashboard(
            inquiries_by_status=await self._by_status(
                db, InquiryStatus, SalesInquiry.status, mine
            ),
            recent_inquiries=[InquiryResponse.model_validate(i) for i in recent],
        )

    # =========================================================================
    # Reports
    # =========================================================================

    async def inventory_status_report(
        self,
        db: AsyncSession,
        category: str | None = None,
        low_stock_only: bool = False,
    ) -> list[InventoryStatusRow]:
        """In-stock boxes and units per active product, lowest stock first."""
        threshold = self.settings.low_stock_threshold
        boxes = func.count(InventoryItem.id)
        units = func.coalesce(func.sum(InventoryItem.quantity), 0)

        stmt = (
            select(Product.id, Product.name, Product.sku, Product.category, boxes, units)
            .outerjoin(
                InventoryItem,
                (InventoryItem.product_id == Product.id)
                & InventoryItem.status.in_(IN_STOCK_STATUSES),
            )
            .where(Product.is_active.is_(True))
            .group_by(Product.id, Product.name, Product.sku, Product.category)
            .order_by(units.asc(), Product.name)
        )
        if category is not None:
            stmt = stmt.where(Product.category == category)
        if low_stock_only:
            stmt = stmt.having(units < threshold)

        rows = [
            InventoryStatusRow(
                product_id=pid,
                product_name=name,
                sku=sku,
                category=cat,
                boxes=int(box_count),
                total_units=int(total),
                low_stock=int(total) < threshold,
            )
            for pid, name, sku, cat, box_count, total in (await db.execute(stmt)).all()
        ]
        logger.info(
            "dashboards.inventory_status_report",
            row_count=len(rows),
            low_stock_count=sum(r.low_stock for r in rows),
        )
        return rows

    async def movement_report(
        self,
        db: AsyncSession,
        date_from: date | None = None,
        date_to: date | None = None,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[MovementReportRow]:
        """Approved ledger totals per day and movement type; scans are excluded."""
        start, end = resolve_range(date_from, date_to, self.settings.report_max_days)
        day = func.date(InventoryMovement.created_at)

        stmt = (
            select(
                day.label("day"),
                InventoryMovement.movement_type,
                func.count(InventoryMovement.id),
                func.coalesce(func.sum(InventoryMovement.quantity), 0),
            )
            .where(
                InventoryMovement.created_at >= datetime.combine(start, time.min, tzinfo=UTC),
                InventoryMovement.created_at
                < datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC),
                InventoryMovement.status == MovementStatus.APPROVED.value,
                InventoryMovement.details["event_type"].astext.is_distinct_from(SCAN_EVENT),
            )
            .group_by(day, InventoryMovement.movement_type)
            .order_by(day, InventoryMovement.movement_type)
        )
        if product_id is not None:
            stmt = stmt.where(InventoryMovement.product_id == product_id)
        if warehouse_id is not None:
            stmt = stmt.where(InventoryMovement.warehouse_id == warehouse_id)

        rows = [
            MovementReportRow(
                day=row_day,
                movement_type=movement_type,
                movement_count=int(count),
                total_quantity=int(total),
            )
            for row_day, movement_type, count, total in (await db.execute(stmt)).all()
        ]
        logger.info(
            "dashboards.movement_report",
            date_from=str(start),
            date_to=str(end),
            row_count=len(rows),
        )
        return rows

    async def batch_tracking_report(
        self,
        db: AsyncSession,
        product_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[BatchTrackingRow]:
        """Original, remaining and sold units per batch, newest batch first."""
        if date_from and date_to and date_to < date_from:
            raise ValidationError(message="date_to must be on or after date_from")

        remaining = (
            select(
                BatchItem.batch_id.label("batch_id"),
                func.sum(BatchItem.quantity).label("quantity"),
            )
            .group_by(BatchItem.batch_id)
            .subquery()
        )
        sold = (
            select(
                BatchItem.batch_id.label("batch_id"),
                func.sum(StockOutDetail.quantity).label("quantity"),
            )
            .join(StockOutDetail, StockOutDetail.barcode == BatchItem.barcode)
            .group_by(BatchItem.batch_id)
            .subquery()
        )

        stmt = (
            select(
                ProcessedBatch,
                Product.name,
                func.coalesce(remaining.c.quantity, 0),
                func.coalesce(sold.c.quantity, 0),
            )
            .join(Product, Product.id == ProcessedBatch.product_id)
            .outerjoin(remaining, remaining.c.batch_id == ProcessedBatch.id)
            .outerjoin(sold, sold.c.batch_id == ProcessedBatch.id)
            .order_by(ProcessedBatch.processed_at.desc(), ProcessedBatch.id.desc())
        )
        if product_id is not None:
            stmt = stmt.where(ProcessedBatch.product_id == product_id)
        if date_from is not None:
            stmt = stmt.where(
                ProcessedBatch.processed_at >= datetime.combine(date_from, time.min, tzinfo=UTC)
            )
        if date_to is not None:
            stmt = stmt.where(
                ProcessedBatch.processed_at
                < datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=UTC)
            )

        return [
            BatchTrackingRow(
                batch_id=batch.id,
                batch_number=batch.batch_number,
                product_id=batch.product_id,
                product_name=product_name,
                processed_at=batch.processed_at,
                boxes=batch.total_boxes,
                original_quantity=batch.total_quantity,
                remaining_quantity=int(left),
                sold_quantity=int(sold_qty),
            )
            for batch, product_name, left, sold_qty in (await db.execute(stmt)).all()
        ]
