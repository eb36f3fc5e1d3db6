"""Tests for expanding batch input into boxes."""

from wms.features.stock_in.schemas import BatchInput
from wms.features.stock_in.service import batch_number_for, plan_batch

PLAN_OPTIONS = {"prefix": "BC", "suffix_width": 3, "default_box_count": 10}


def test_batch_number_format():
    assert batch_number_for(42, 3) == "BATCH-000042-03"


def test_generated_boxes_from_base_barcode():
    batch = BatchInput(
        warehouse_id=1,
        location_id=2,
        box_count=3,
        quantity_per_box=12,
        base_barcode="SKU-8901",
        color="Blue",
    )

    plan = plan_batch(batch, 1, 42, **PLAN_OPTIONS)

    assert [box.barcode for box in plan.boxes] == ["8901001", "8901002", "8901003"]
    assert all(box.quantity == 12 and box.color == "Blue" for box in plan.boxes)
    assert plan.total_quantity == 36


def test_generated_boxes_without_base_use_prefix_and_stock_in():
    batch = BatchInput(warehouse_id=1, location_id=2, quantity_per_box=5)

    plan = plan_batch(batch, 2, 42, **PLAN_OPTIONS)

    assert len(plan.boxes) == 10
    assert plan.boxes[0].barcode == "BC00004202001"
    assert plan.boxes[-1].barcode == "BC00004202010"


def test_explicit_boxes_inherit_batch_attributes():
    batch = BatchInput(
        warehouse_id=1,
        location_id=2,
        size="M",
        boxes=[
            {"barcode": "X-1", "quantity": 4},
            {"barcode": "X-2", "quantity": 6, "size": "L"},
        ],
    )

    plan = plan_batch(batch, 1, 7, **PLAN_OPTIONS)

    assert [(b.barcode, b.size) for b in plan.boxes] == [("X-1", "M"), ("X-2", "L")]
    assert plan.total_quantity == 10
    assert (plan.warehouse_id, plan.location_id, plan.sequence) == (1, 2, 1)
