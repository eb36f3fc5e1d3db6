"""Tests for validating scanned box deductions."""

import pytest

from wms.core.exceptions import InsufficientStockError, ValidationError
from wms.features.stock_out.schemas import Deduction
from wms.features.stock_out.service import BoxSnapshot, validate_deductions

BOXES = {
    "1001001": BoxSnapshot("1001001", 3, 24, "available"),
    "1001002": BoxSnapshot("1001002", 3, 10, "reserved"),
    "1001003": BoxSnapshot("1001003", 3, 24, "sold"),
    "2002001": BoxSnapshot("2002001", 8, 24, "available"),
}


def take(*pairs: tuple[str, int]) -> list[Deduction]:
    return [Deduction(barcode=b, quantity=q) for b, q in pairs]


def test_returns_total_when_covered() -> None:
    total = validate_deductions(take(("1001001", 24), ("1001002", 6)), BOXES, 3, 30)

    assert total == 30


def test_more_than_required_is_accepted() -> None:
    assert validate_deductions(take(("1001001", 24), ("1001002", 10)), BOXES, 3, 30) == 34


def test_repeated_barcode() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_deductions(take(("1001001", 5), ("1001001", 5)), BOXES, 3, 10)

    assert exc_info.value.details == {"barcodes": ["1001001"]}


def test_unknown_barcode() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_deductions(take(("9999999", 5)), BOXES, 3, 5)

    assert exc_info.value.message == "Unknown barcodes"


def test_box_of_another_product() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_deductions(take(("2002001", 5)), BOXES, 3, 5)

    assert exc_info.value.details["barcodes"] == ["2002001"]
    assert exc_info.value.details["product_id"] == 3


def test_box_not_in_stock() -> None:
    with pytest.raises(ValidationError, match="not in stock"):
        validate_deductions(take(("1001003", 5)), BOXES, 3, 5)


def test_deduction_larger_than_box() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_deductions(take(("1001002", 11)), BOXES, 3, 11)

    assert exc_info.value.details == {"barcode": "1001002", "requested": 11, "available": 10}


def test_short_total_is_insufficient_stock() -> None:
    with pytest.raises(InsufficientStockError) as exc_info:
        validate_deductions(take(("1001001", 20)), BOXES, 3, 30)

    assert exc_info.value.status_code == 409
    assert exc_info.value.details == {"scanned": 20, "required": 30}
