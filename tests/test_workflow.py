"""End-to-end warehouse flow: receive stock, ship it, check the ledger."""

import pytest
from sqlalchemy import func, select

from wms.features.inventory.models import InventoryItem, InventoryMovement
from wms.features.profiles.models import Profile, Role

pytestmark = pytest.mark.integration


def as_profile(profile: Profile) -> dict[str, str]:
    return {"X-Profile-ID": str(profile.id)}


@pytest.fixture
async def staff(db_session) -> dict[Role, Profile]:
    profiles = {
        role: Profile(username=role.value, name=role.value.title(), role=role.value, active=True)
        for role in Role
    }
    db_session.add_all(profiles.values())
    await db_session.commit()
    return profiles


async def test_receive_and_ship(db_client, db_session, staff):
    admin = as_profile(staff[Role.ADMIN])
    manager = as_profile(staff[Role.WAREHOUSE_MANAGER])
    operator = as_profile(staff[Role.FIELD_OPERATOR])
    sales = as_profile(staff[Role.SALES_OPERATOR])

    # Warehouse, location and product
    response = await db_client.post("/warehouses", json={"name": "Main"}, headers=admin)
    assert response.status_code == 201
    warehouse_id = response.json()["id"]
    response = await db_client.post(
        f"/warehouses/{warehouse_id}/locations", json={"floor": 1, "zone": "b"}, headers=manager
    )
    assert response.status_code == 201
    location_id = response.json()["id"]
    response = await db_client.post(
        "/products", json={"name": "Cotton Shirt", "sku": "shirt-003"}, headers=manager
    )
    assert response.status_code == 201
    product_id = response.json()["id"]

    # Stock-in: submit, approve, process into two boxes of 24
    response = await db_client.post(
        "/stock-in", json={"product_id": product_id, "boxes": 2}, headers=operator
    )
    assert response.status_code == 201
    stock_in_id = response.json()["id"]
    response = await db_client.post(f"/stock-in/{stock_in_id}/approve", headers=manager)
    assert response.json()["status"] == "approved"
    response = await db_client.post(
        f"/stock-in/{stock_in_id}/process",
        json={
            "batches": [
                {
                    "warehouse_id": warehouse_id,
                    "location_id": location_id,
                    "box_count": 2,
                    "quantity_per_box": 24,
                    "base_barcode": "BC1001",
                }
            ]
        },
        headers=manager,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["stock_in"]["status"] == "completed"
    assert body["batches"][0]["barcodes"] == ["1001001", "1001002"]

    response = await db_client.get("/products/stock")
    (row,) = [r for r in response.json() if r["id"] == product_id]
    assert row["in_stock_quantity"] == 48

    # Stock-out: request 30, approve, deduct 24 + 6
    response = await db_client.post(
        "/stock-out",
        json={"product_id": product_id, "quantity": 30, "destination": "Store 12"},
        headers=sales,
    )
    assert response.status_code == 201
    stock_out_id = response.json()["id"]
    await db_client.post(f"/stock-out/{stock_out_id}/approve", headers=manager)

    response = await db_client.post(
        f"/stock-out/{stock_out_id}/process",
        json={"deductions": [{"barcode": "1001001", "quantity": 24}]},
        headers=manager,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "INSUFFICIENT_STOCK"

    response = await db_client.post(
        f"/stock-out/{stock_out_id}/process",
        json={
            "deductions": [
                {"barcode": "1001001", "quantity": 24},
                {"barcode": "1001002", "quantity": 6},
            ]
        },
        headers=manager,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert len(response.json()["details"]) == 2

    boxes = (
        await db_session.execute(select(InventoryItem).order_by(InventoryItem.barcode))
    ).scalars().all()
    assert [(b.quantity, b.status) for b in boxes] == [(0, "sold"), (18, "available")]

    ledger_total = (
        await db_session.execute(
            select(func.sum(InventoryMovement.quantity)).where(
                InventoryMovement.product_id == product_id
            )
        )
    ).scalar_one()
    assert ledger_total == 18

    response = await db_client.get("/notifications/unread-count", headers=operator)
    assert response.json()["unread"] >= 2
