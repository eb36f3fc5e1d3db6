"""Tests for stock-in schemas."""

import pytest
from pydantic import ValidationError

from wms.features.stock_in.schemas import BatchInput, StockInCreate, StockInProcessRequest


def test_boxes_must_be_positive():
    with pytest.raises(ValidationError):
        StockInCreate(product_id=1, boxes=0)


def test_generated_batch_requires_quantity_per_box():
    with pytest.raises(ValidationError, match="quantity_per_box is required"):
        BatchInput(warehouse_id=1, location_id=2, box_count=5)


def test_explicit_and_generated_boxes_are_exclusive():
    with pytest.raises(ValidationError, match="not both"):
        BatchInput(
            warehouse_id=1,
            location_id=2,
            quantity_per_box=10,
            boxes=[{"barcode": "A1", "quantity": 5}],
        )


def test_box_count_must_match_explicit_boxes():
    with pytest.raises(ValidationError, match="box_count"):
        BatchInput(
            warehouse_id=1,
            location_id=2,
            box_count=3,
            boxes=[{"barcode": "A1", "quantity": 5}],
        )


def test_box_barcode_characters():
    with pytest.raises(ValidationError):
        BatchInput(warehouse_id=1, location_id=2, boxes=[{"barcode": "A 1", "quantity": 5}])


def test_process_request_needs_a_batch():
    with pytest.raises(ValidationError):
        StockInProcessRequest(batches=[])
