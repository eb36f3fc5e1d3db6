"""Route tests for warehouses with the service patched out."""

from unittest.mock import AsyncMock, patch

from wms.features.profiles.models import Role


async def test_customers_cannot_list_warehouses(client, act_as):
    act_as(Role.CUSTOMER)

    response = await client.get("/warehouses")

    assert response.status_code == 403


async def test_only_admin_creates_warehouses(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER)

    response = await client.post("/warehouses", json={"name": "North"})

    assert response.status_code == 403


async def test_manager_deletes_location(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER)

    with patch("wms.features.warehouses.routes.WarehouseService") as service_cls:
        service_cls.return_value.delete_location = AsyncMock(return_value=None)
        response = await client.delete("/warehouses/1/locations/4")

    assert response.status_code == 204
    service_cls.return_value.delete_location.assert_awaited_once()
