"""Test fixtures for the stock-out module."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from wms.features.inventory.models import InventoryItem, InventoryStatus
from wms.features.stock_out.models import StockOut, StockOutStatus
from wms.features.stock_out.service import StockOutService

STAMP = datetime(2026, 2, 20, 14, 0, tzinfo=UTC)


@pytest.fixture
def stock_out_factory():
    """Build detached StockOut rows for product 3."""

    def build(
        stock_out_id: int = 1,
        status: StockOutStatus = StockOutStatus.PENDING,
        **overrides,
    ) -> StockOut:
        values = {
            "id": stock_out_id,
            "product_id": 3,
            "quantity": 30,
            "destination": "Store 12",
            "status": status.value,
            "requested_by": 7,
            "created_at": STAMP,
            "updated_at": STAMP,
        }
        values.update(overrides)
        return StockOut(**values)

    return build


@pytest.fixture
def box_factory():
    def build(box_id: int, barcode: str, quantity: int = 24, **overrides) -> InventoryItem:
        values = {
            "id": box_id,
            "product_id": 3,
            "warehouse_id": 1,
            "location_id": 2,
            "batch_id": 4,
            "barcode": barcode,
            "quantity": quantity,
            "status": InventoryStatus.AVAILABLE.value,
            "created_at": STAMP,
            "updated_at": STAMP,
        }
        values.update(overrides)
        return InventoryItem(**values)

    return build


@pytest.fixture
def service() -> StockOutService:
    svc = StockOutService()
    svc.catalog = AsyncMock()
    svc.notifications = AsyncMock()
    return svc
