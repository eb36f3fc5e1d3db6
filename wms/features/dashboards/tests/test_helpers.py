"""Tests for dashboard and report helpers."""

from datetime import date

import pytest

from wms.core.exceptions import ValidationError
from wms.features.dashboards.schemas import InventoryStatusRow, MovementReportRow
from wms.features.dashboards.service import fill_status_counts, resolve_range, rows_to_csv
from wms.features.stock_in.models import StockInStatus


def test_fill_status_counts_adds_zeros() -> None:
    counts = fill_status_counts(StockInStatus, [("pending", 3), ("completed", 12)])

    assert counts == {
        "pending": 3,
        "approved": 0,
        "rejected": 0,
        "processing": 0,
        "completed": 12,
        "failed": 0,
    }


class TestResolveRange:
    def test_defaults_to_last_thirty_days(self) -> None:
        assert resolve_range(None, date(2026, 3, 31), 366) == (
            date(2026, 3, 2),
            date(2026, 3, 31),
        )

    def test_end_defaults_to_today(self) -> None:
        _, end = resolve_range(None, None, 366)

        assert end == date.today()

    def test_reversed(self) -> None:
        with pytest.raises(ValidationError):
            resolve_range(date(2026, 3, 10), date(2026, 3, 1), 366)

    def test_too_long(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            resolve_range(date(2025, 1, 1), date(2026, 1, 1), 366)

        assert exc_info.value.details["max_days"] == 366

    def test_single_day(self) -> None:
        day = date(2026, 3, 1)

        assert resolve_range(day, day, 1) == (day, day)


class TestRowsToCsv:
    def test_header_and_rows(self) -> None:
        rows = [
            InventoryStatusRow(
                product_id=3,
                product_name="Cotton Shirt",
                sku="SHIRT-003",
                category="Shirts",
                boxes=2,
                total_units=8,
                low_stock=True,
            ),
            InventoryStatusRow(
                product_id=8, product_name="Denim", boxes=0, total_units=0, low_stock=True
            ),
        ]

        lines = rows_to_csv(rows, InventoryStatusRow).splitlines()

        assert lines[0] == "product_id,product_name,sku,category,boxes,total_units,low_stock"
        assert lines[1] == "3,Cotton Shirt,SHIRT-003,Shirts,2,8,True"
        assert lines[2] == "8,Denim,,,0,0,True"

    def test_empty_report_keeps_header(self) -> None:
        text = rows_to_csv([], MovementReportRow)

        assert text.strip() == "day,movement_type,movement_count,total_quantity"
