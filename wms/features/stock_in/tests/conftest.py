"""Test fixtures for the stock-in module."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from wms.features.stock_in.models import StockIn, StockInStatus
from wms.features.stock_in.service import StockInService


@pytest.fixture
def stock_in_factory():
    """Build detached StockIn rows."""

    def build(stock_in_id: int = 1, status: StockInStatus = StockInStatus.PENDING, **overrides):
        stamp = datetime(2026, 2, 1, 8, 0, tzinfo=UTC)
        values = {
            "id": stock_in_id,
            "product_id": 3,
            "boxes": 4,
            "source": "Tiruppur Mills",
            "status": status.value,
            "submitted_by": 20,
            "created_at": stamp,
            "updated_at": stamp,
        }
        values.update(overrides)
        return StockIn(**values)

    return build


@pytest.fixture
def service() -> StockInService:
    """Service with its collaborating services mocked."""
    svc = StockInService()
    svc.catalog = AsyncMock()
    svc.warehouses = AsyncMock()
    svc.notifications = AsyncMock()
    return svc
