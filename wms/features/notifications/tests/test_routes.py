"""Route tests for the notification inbox."""

from unittest.mock import AsyncMock, patch

from wms.features.profiles.models import Role


async def test_inbox_requires_identity(client):
    response = await client.get("/notifications")

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


async def test_unread_count_for_customer(client, act_as):
    customer = act_as(Role.CUSTOMER, 30)

    with patch("wms.features.notifications.routes.NotificationService") as service_cls:
        service_cls.return_value.unread_count = AsyncMock(return_value=2)
        response = await client.get("/notifications/unread-count")

    assert response.status_code == 200
    assert response.json() == {"unread": 2}
    assert service_cls.return_value.unread_count.call_args.kwargs["profile"] is customer


async def test_read_all(client, act_as):
    act_as(Role.FIELD_OPERATOR, 20)

    with patch("wms.features.notifications.routes.NotificationService") as service_cls:
        service_cls.return_value.mark_all_read = AsyncMock(return_value=5)
        response = await client.post("/notifications/read-all")

    assert response.json() == {"updated": 5}


async def test_unknown_action_filter(client, act_as):
    act_as(Role.ADMIN)

    response = await client.get("/notifications", params={"action_type": "nope"})

    assert response.status_code == 422
