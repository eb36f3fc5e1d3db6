"""Unit tests for the batch service."""

from datetime import UTC, date, datetime

import pytest

from wms.core.exceptions import NotFoundError, ValidationError
from wms.features.batches.models import BatchItem, ProcessedBatch
from wms.features.batches.schemas import BatchFilters
from wms.features.batches.service import BatchService
from wms.features.catalog.models import Product
from wms.shared import PaginationParams

STAMP = datetime(2026, 2, 3, tzinfo=UTC)


def make_batch() -> ProcessedBatch:
    return ProcessedBatch(
        id=4,
        batch_number="BATCH-000002-01",
        stock_in_id=2,
        product_id=3,
        warehouse_id=1,
        location_id=2,
        total_boxes=2,
        total_quantity=30,
        status="completed",
        processed_at=STAMP,
        created_at=STAMP,
        items=[
            BatchItem(
                id=1,
                barcode="1001001",
                quantity=10,
                color="Red",
                warehouse_id=1,
                location_id=2,
                status="available",
            ),
            BatchItem(
                id=2,
                barcode="1001002",
                quantity=20,
                warehouse_id=1,
                location_id=2,
                status="sold",
            ),
        ],
    )


async def test_missing_batch(mock_db, make_result):
    mock_db.execute.return_value = make_result(None)

    with pytest.raises(NotFoundError):
        await BatchService().get_batch(mock_db, 99)


async def test_batch_detail_lists_boxes(mock_db, make_result):
    mock_db.execute.return_value = make_result(make_batch())

    detail = await BatchService().get_batch(mock_db, 4)

    assert [item.barcode for item in detail.items] == ["1001001", "1001002"]
    assert detail.items[1].status.value == "sold"


async def test_reversed_date_range_rejected(mock_db):
    filters = BatchFilters(date_from=date(2026, 3, 1), date_to=date(2026, 2, 1))

    with pytest.raises(ValidationError):
        await BatchService().list_batches(mock_db, PaginationParams(), filters)
    mock_db.execute.assert_not_awaited()


async def test_labels_use_product_name(mock_db, make_result):
    mock_db.execute.return_value = make_result(make_batch())
    mock_db.get.return_value = Product(id=3, name="Linen Trousers")

    batch_number, pdf = await BatchService().batch_labels_pdf(mock_db, 4)

    assert batch_number == "BATCH-000002-01"
    assert pdf.startswith(b"%PDF")
