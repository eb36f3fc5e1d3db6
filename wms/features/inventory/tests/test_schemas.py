"""Tests for inventory schemas."""

import pytest
from pydantic import ValidationError

from wms.features.inventory.models import InventoryStatus
from wms.features.inventory.schemas import AdjustmentRequest, ScanRequest, TransferCreate


def test_scan_barcode_is_stripped():
    assert ScanRequest(barcode=" 1001001\n").barcode == "1001001"


def test_blank_scan_rejected():
    with pytest.raises(ValidationError):
        ScanRequest(barcode="   ")


class TestAdjustmentRequest:
    def test_requires_a_change(self) -> None:
        with pytest.raises(ValidationError, match="Provide a new quantity"):
            AdjustmentRequest(reason="count")

    def test_cannot_mark_sold_by_adjustment(self) -> None:
        with pytest.raises(ValidationError, match="available, reserved or damaged"):
            AdjustmentRequest(status=InventoryStatus.SOLD, reason="gone")

    def test_mark_damaged(self) -> None:
        data = AdjustmentRequest(status=InventoryStatus.DAMAGED, reason="water damage")
        assert data.quantity is None


def test_transfer_needs_distinct_locations():
    with pytest.raises(ValidationError, match="must differ"):
        TransferCreate(
            product_id=1,
            source_warehouse_id=1,
            source_location_id=2,
            destination_warehouse_id=1,
            destination_location_id=2,
            barcodes=["1001001"],
        )
