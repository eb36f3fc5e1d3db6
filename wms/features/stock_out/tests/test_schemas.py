"""Tests for stock-out schemas."""

import pytest
from pydantic import ValidationError

from wms.features.stock_out.schemas import (
    Deduction,
    StockOutApprove,
    StockOutCreate,
    StockOutProcessRequest,
)


class TestStockOutCreate:
    def test_valid(self) -> None:
        data = StockOutCreate(product_id=3, quantity=30, destination="Store 12")

        assert data.reason is None

    @pytest.mark.parametrize("quantity", [0, -4])
    def test_quantity_must_be_positive(self, quantity: int) -> None:
        with pytest.raises(ValidationError):
            StockOutCreate(product_id=3, quantity=quantity, destination="Store 12")

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StockOutCreate(product_id=3, quantity=1, destination="Store", status="approved")


def test_approved_quantity_optional() -> None:
    assert StockOutApprove().approved_quantity is None
    with pytest.raises(ValidationError):
        StockOutApprove(approved_quantity=0)


def test_deduction_barcode_is_stripped() -> None:
    assert Deduction(barcode="  1001001 ", quantity=2).barcode == "1001001"


class TestProcessRequest:
    def test_needs_at_least_one_deduction(self) -> None:
        with pytest.raises(ValidationError):
            StockOutProcessRequest(deductions=[])

    def test_caps_deductions(self) -> None:
        deductions = [{"barcode": f"B{i}", "quantity": 1} for i in range(1001)]

        with pytest.raises(ValidationError):
            StockOutProcessRequest(deductions=deductions)
