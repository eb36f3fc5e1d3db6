"""Batch queries and label rendering."""

from datetime import UTC, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.config import get_settings
from wms.core.exceptions import NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.batches.barcodes import LabelData, render_label_sheet, render_svg
from wms.features.batches.models import BatchItem, ProcessedBatch
from wms.features.batches.schemas import BatchDetailResponse, BatchFilters, BatchResponse
from wms.features.catalog.models import Product
from wms.shared import PaginatedResponse, PaginationParams, fetch_page, paginate_response

logger = get_logger(__name__)


class BatchService:
    """Read processed batches and produce their barcode artwork."""

    async def _load(self, db: AsyncSession, batch_id: int) -> ProcessedBatch:
        stmt = (
            select(ProcessedBatch)
            .options(selectinload(ProcessedBatch.items))
            .where(ProcessedBatch.id == batch_id)
        )
        batch = (await db.execute(stmt)).scalar_one_or_none()
        if batch is None:
            raise NotFoundError(message=f"Batch not found: {batch_id}")
        return batch

    async def list_batches(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: BatchFilters,
    ) -> PaginatedResponse[BatchResponse]:
        """Batches, most recently processed first."""
        stmt = select(ProcessedBatch)
        if filters.product_id is not None:
            stmt = stmt.where(ProcessedBatch.product_id == filters.product_id)
        if filters.warehouse_id is not None:
            stmt = stmt.where(ProcessedBatch.warehouse_id == filters.warehouse_id)
        if filters.stock_in_id is not None:
            stmt = stmt.where(ProcessedBatch.stock_in_id == filters.stock_in_id)
        if filters.status is not None:
            stmt = stmt.where(ProcessedBatch.status == filters.status.value)
        if filters.date_from and filters.date_to and filters.date_to < filters.date_from:
            raise ValidationError(message="date_to must be on or after date_from")
        if filters.date_from is not None:
            start = datetime.combine(filters.date_from, time.min, tzinfo=UTC)
            stmt = stmt.where(ProcessedBatch.processed_at >= start)
        if filters.date_to is not None:
            end = datetime.combine(filters.date_to + timedelta(days=1), time.min, tzinfo=UTC)
            stmt = stmt.where(ProcessedBatch.processed_at < end)
        if filters.search:
            stmt = stmt.where(ProcessedBatch.batch_number.ilike(f"%{filters.search}%"))

        rows, total = await fetch_page(
            db, stmt, pagination, ProcessedBatch.processed_at.desc(), ProcessedBatch.id.desc()
        )
        return paginate_response(
            [BatchResponse.model_validate(b) for b in rows], total, pagination
        )

    async def get_batch(self, db: AsyncSession, batch_id: int) -> BatchDetailResponse:
        return BatchDetailResponse.model_validate(await self._load(db, batch_id))

    async def list_batch_barcodes(self, db: AsyncSession, batch_id: int) -> list[str]:
        """Barcodes of every box in the batch, in print order."""
        await self._load(db, batch_id)
        stmt = (
            select(BatchItem.barcode)
            .where(BatchItem.batch_id == batch_id)
            .order_by(BatchItem.barcode)
        )
        return list((await db.execute(stmt)).scalars().all())

    def barcode_svg(self, barcode: str) -> bytes:
        """Render one barcode in the configured symbology."""
        return render_svg(barcode, get_settings().barcode_symbology)

    async def batch_labels_pdf(self, db: AsyncSession, batch_id: int) -> tuple[str, bytes]:
        """Printable label sheet for every box of a batch.

        Returns:
            Tuple of (batch_number, PDF bytes).
        """
        batch = await self._load(db, batch_id)
        product = await db.get(Product, batch.product_id)
        product_name = product.name if product else f"Product {batch.product_id}"

        labels = [
            LabelData(
                barcode=item.barcode,
                product_name=product_name,
                quantity=item.quantity,
                batch_number=batch.batch_number,
                color=item.color,
                size=item.size,
            )
            for item in batch.items
        ]
        pdf = render_label_sheet(labels, title=f"Labels {batch.batch_number}")

        logger.info(
            "batches.labels_rendered",
            batch_id=batch_id,
            label_count=len(labels),
            size_bytes=len(pdf),
        )
        return batch.batch_number, pdf
