"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError


async def test_health_check_returns_ok(client, mock_db):
    """Liveness never touches the database."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["app_name"] == "WarehouseWMS"
    assert data["database"] is None
    mock_db.execute.assert_not_awaited()


class TestReadiness:
    async def test_connected_and_migrated(self, client, mock_db, make_result) -> None:
        mock_db.execute.return_value = make_result(True)

        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "connected"
        assert response.json()["schema_ready"] is True

    async def test_connected_without_tables_is_degraded(
        self, client, mock_db, make_result
    ) -> None:
        mock_db.execute.return_value = make_result(False)

        response = await client.get("/health/ready")

        assert response.json()["status"] == "degraded"
        assert response.json()["schema_ready"] is False

    async def test_unreachable_database(self, client, mock_db) -> None:
        mock_db.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )

        response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["database"] == "disconnected"
