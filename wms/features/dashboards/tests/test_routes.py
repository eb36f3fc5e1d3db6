"""Route tests for dashboards and reports."""

from unittest.mock import AsyncMock, patch

import pytest

from wms.features.dashboards.schemas import InventoryStatusRow, SalesDashboard
from wms.features.profiles.models import Role

ROWS = [
    InventoryStatusRow(
        product_id=3,
        product_name="Cotton Shirt",
        sku="SHIRT-003",
        category="Shirts",
        boxes=2,
        total_units=8,
        low_stock=True,
    )
]


@pytest.mark.parametrize(
    ("path", "role"),
    [
        ("/dashboards/admin", Role.WAREHOUSE_MANAGER),
        ("/dashboards/manager", Role.SALES_OPERATOR),
        ("/dashboards/operator", Role.CUSTOMER),
        ("/dashboards/sales", Role.FIELD_OPERATOR),
        ("/dashboards/customer", Role.ADMIN),
        ("/reports/inventory-status", Role.CUSTOMER),
        ("/reports/movements", Role.FIELD_OPERATOR),
        ("/reports/batch-tracking", Role.SALES_OPERATOR),
    ],
)
async def test_role_gates(client, act_as, path, role):
    act_as(role)

    response = await client.get(path)

    assert response.status_code == 403


async def test_admin_reads_sales_dashboard(client, act_as):
    act_as(Role.ADMIN)
    dashboard = SalesDashboard(
        inquiries_by_status={"new": 1}, orders_by_status={"pending": 0}, order_value="0"
    )

    with patch("wms.features.dashboards.routes.DashboardService") as service_cls:
        service_cls.return_value.sales_dashboard = AsyncMock(return_value=dashboard)
        response = await client.get("/dashboards/sales")

    assert response.status_code == 200
    assert response.json()["inquiries_by_status"] == {"new": 1}


async def test_inventory_status_as_json(client, act_as):
    act_as(Role.SALES_OPERATOR)

    with patch("wms.features.dashboards.routes.DashboardService") as service_cls:
        service_cls.return_value.inventory_status_report = AsyncMock(return_value=ROWS)
        response = await client.get("/reports/inventory-status")

    assert response.status_code == 200
    assert response.json()[0]["low_stock"] is True


async def test_inventory_status_as_csv(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER)

    with patch("wms.features.dashboards.routes.DashboardService") as service_cls:
        service_cls.return_value.inventory_status_report = AsyncMock(return_value=ROWS)
        response = await client.get(
            "/reports/inventory-status", params={"format": "csv", "low_stock_only": "true"}
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "inventory-status-" in response.headers["content-disposition"]
    assert response.text.splitlines()[1] == "3,Cotton Shirt,SHIRT-003,Shirts,2,8,True"
    kwargs = service_cls.return_value.inventory_status_report.call_args.kwargs
    assert kwargs["low_stock_only"] is True


async def test_unknown_report_format(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER)

    response = await client.get("/reports/movements", params={"format": "xlsx"})

    assert response.status_code == 422
