"""Unit tests for dashboard aggregates and reports."""

from datetime import date
from decimal import Decimal

import pytest

from wms.core.config import get_settings
from wms.core.exceptions import ValidationError
from wms.features.dashboards.service import DashboardService
from wms.features.profiles.models import Role


@pytest.fixture
def service() -> DashboardService:
    svc = DashboardService()
    svc.settings = get_settings().model_copy(
        update={"low_stock_threshold": 10, "recent_activity_limit": 5, "report_max_days": 90}
    )
    return svc


async def test_sales_dashboard(service, mock_db, make_result):
    mock_db.execute.side_effect = [
        make_result(Decimal("1250.50")),
        make_result(rows=[("new", 2), ("converted", 1)]),
        make_result(rows=[("pending", 1)]),
    ]

    result = await service.sales_dashboard(mock_db)

    assert result.order_value == Decimal("1250.50")
    assert result.inquiries_by_status["new"] == 2
    assert result.inquiries_by_status["closed"] == 0
    assert result.orders_by_status["pending"] == 1
    assert result.orders_by_status["dispatched"] == 0


async def test_customer_dashboard_is_scoped(service, mock_db, make_result, profile_factory):
    mock_db.execute.side_effect = [
        make_result(scalars=[]),
        make_result(rows=[("responded", 1)]),
    ]

    result = await service.customer_dashboard(mock_db, profile_factory(Role.CUSTOMER, 30))

    assert result.inquiries_by_status["responded"] == 1
    assert result.recent_inquiries == []
    scoped = str(mock_db.execute.call_args_list[0].args[0])
    assert "customer_profile_id" in scoped


class TestInventoryStatusReport:
    async def test_flags_low_stock(self, service, mock_db, make_result) -> None:
        mock_db.execute.return_value = make_result(
            rows=[
                (8, "Denim", None, None, 0, 0),
                (4, "Linen Shirt", "SHIRT-004", "Shirts", 1, 9),
                (3, "Cotton Shirt", "SHIRT-003", "Shirts", 5, 10),
            ]
        )

        rows = await service.inventory_status_report(mock_db)

        assert [r.low_stock for r in rows] == [True, True, False]
        assert rows[2].total_units == 10

    async def test_low_stock_only_filters_in_sql(self, service, mock_db, make_result) -> None:
        mock_db.execute.return_value = make_result(rows=[])

        await service.inventory_status_report(mock_db, low_stock_only=True)

        stmt = mock_db.execute.call_args.args[0]
        assert "HAVING" in str(stmt)


class TestMovementReport:
    async def test_rows(self, service, mock_db, make_result) -> None:
        mock_db.execute.return_value = make_result(
            rows=[(date(2026, 3, 1), "in", 4, 48), (date(2026, 3, 1), "out", 2, -30)]
        )

        rows = await service.movement_report(
            mock_db, date_from=date(2026, 3, 1), date_to=date(2026, 3, 2)
        )

        assert [(r.movement_type, r.total_quantity) for r in rows] == [("in", 48), ("out", -30)]

    async def test_range_over_limit(self, service, mock_db) -> None:
        with pytest.raises(ValidationError):
            await service.movement_report(
                mock_db, date_from=date(2026, 1, 1), date_to=date(2026, 6, 1)
            )
        mock_db.execute.assert_not_awaited()


async def test_batch_tracking_reversed_range(service, mock_db):
    with pytest.raises(ValidationError):
        await service.batch_tracking_report(
            mock_db, date_from=date(2026, 3, 2), date_to=date(2026, 3, 1)
        )
