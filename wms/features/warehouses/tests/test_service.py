"""Unit tests for the warehouse service."""

from datetime import UTC, datetime

import pytest

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.features.warehouses.models import Warehouse, WarehouseLocation
from wms.features.warehouses.schemas import LocationCreate
from wms.features.warehouses.service import WarehouseService

STAMP = datetime(2026, 1, 1, tzinfo=UTC)


def make_warehouse(warehouse_id: int = 1) -> Warehouse:
    return Warehouse(
        id=warehouse_id,
        name="Main",
        location="Pune",
        is_active=True,
        locations=[],
        created_at=STAMP,
        updated_at=STAMP,
    )


class TestGetLocation:
    async def test_missing_location(self, mock_db) -> None:
        mock_db.get.return_value = None

        with pytest.raises(NotFoundError):
            await WarehouseService().get_location(mock_db, 1, 99)

    async def test_location_of_other_warehouse(self, mock_db) -> None:
        mock_db.get.return_value = WarehouseLocation(id=5, warehouse_id=2, floor=1, zone="A")

        with pytest.raises(ValidationError) as exc_info:
            await WarehouseService().get_location(mock_db, 1, 5)

        assert exc_info.value.details == {"warehouse_id": 1, "location_id": 5}


class TestDeletes:
    async def test_warehouse_with_inventory_cannot_be_deleted(
        self, mock_db, make_result
    ) -> None:
        mock_db.execute.side_effect = [make_result(make_warehouse()), make_result(3)]

        with pytest.raises(ConflictError):
            await WarehouseService().delete_warehouse(mock_db, 1)
        mock_db.delete.assert_not_awaited()

    async def test_empty_location_is_deleted(self, mock_db, make_result) -> None:
        location = WarehouseLocation(id=5, warehouse_id=1, floor=1, zone="A")
        mock_db.get.return_value = location
        mock_db.execute.return_value = make_result(0)

        await WarehouseService().delete_location(mock_db, 1, 5)

        mock_db.delete.assert_awaited_once_with(location)

    async def test_occupied_location_reports_box_count(self, mock_db, make_result) -> None:
        mock_db.get.return_value = WarehouseLocation(id=5, warehouse_id=1, floor=1, zone="A")
        mock_db.execute.return_value = make_result(4)

        with pytest.raises(ConflictError) as exc_info:
            await WarehouseService().delete_location(mock_db, 1, 5)

        assert exc_info.value.details["box_count"] == 4

    async def test_emptied_location_is_kept_for_history(self, mock_db, make_result) -> None:
        mock_db.get.return_value = WarehouseLocation(id=5, warehouse_id=1, floor=1, zone="A")
        mock_db.execute.side_effect = [make_result(0), make_result(True)]

        with pytest.raises(ConflictError, match="empty but has stock history") as exc_info:
            await WarehouseService().delete_location(mock_db, 1, 5)

        assert exc_info.value.details["box_count"] == 0
        stock_sql = str(mock_db.execute.call_args_list[0].args[0])
        assert "inventory.status !=" in stock_sql
        assert "inventory.quantity >" in stock_sql
        mock_db.delete.assert_not_awaited()


async def test_duplicate_floor_zone_conflicts(mock_db, make_result):
    mock_db.execute.side_effect = [make_result(make_warehouse()), make_result((8,))]

    with pytest.raises(ConflictError, match="Floor 1 - Zone A"):
        await WarehouseService().create_location(mock_db, 1, LocationCreate(floor=1, zone="a"))


async def test_summary_totals_locations(mock_db, make_result):
    mock_db.execute.side_effect = [
        make_result(make_warehouse()),
        make_result(rows=[(10, 0, "A", 3, 60), (11, 1, "B", 0, 0)]),
    ]

    summary = await WarehouseService().warehouse_summary(mock_db, 1)

    assert summary.total_boxes == 3
    assert summary.total_quantity == 60
    assert [loc.display_name for loc in summary.locations] == [
        "Floor 0 - Zone A",
        "Floor 1 - Zone B",
    ]
