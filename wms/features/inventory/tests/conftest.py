"""Test fixtures for the inventory module."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from wms.features.inventory.models import InventoryItem, InventoryStatus
from wms.features.inventory.service import InventoryService

STAMP = datetime(2026, 2, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def box_factory():
    """Build detached boxes (InventoryItem rows)."""

    def build(
        box_id: int = 1,
        barcode: str = "1001001",
        status: InventoryStatus = InventoryStatus.AVAILABLE,
        **overrides,
    ) -> InventoryItem:
        values = {
            "id": box_id,
            "product_id": 3,
            "warehouse_id": 1,
            "location_id": 2,
            "batch_id": 4,
            "barcode": barcode,
            "quantity": 12,
            "color": "Red",
            "size": "M",
            "status": status.value,
            "created_at": STAMP,
            "updated_at": STAMP,
        }
        values.update(overrides)
        return InventoryItem(**values)

    return build


@pytest.fixture
def service() -> InventoryService:
    svc = InventoryService()
    svc.notifications = AsyncMock()
    svc.warehouses = AsyncMock()
    return svc
