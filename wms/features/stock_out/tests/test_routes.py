"""Route tests for the stock-out workflow with the service patched out."""

from unittest.mock import AsyncMock, patch

from wms.core.exceptions import InsufficientStockError
from wms.features.profiles.models import Role
from wms.features.stock_out.models import StockOutStatus
from wms.features.stock_out.schemas import StockOutDetailedResponse, StockOutResponse

PROCESS_BODY = {"deductions": [{"barcode": "1001001", "quantity": 24}]}


async def test_customer_cannot_request_stock_out(client, act_as):
    act_as(Role.CUSTOMER)

    response = await client.post(
        "/stock-out", json={"product_id": 3, "quantity": 5, "destination": "Store 12"}
    )

    assert response.status_code == 403


async def test_sales_operator_requests_stock_out(client, act_as, stock_out_factory):
    sales = act_as(Role.SALES_OPERATOR, 7)
    created = StockOutResponse.model_validate(stock_out_factory(quantity=5))

    with patch("wms.features.stock_out.routes.StockOutService") as service_cls:
        service_cls.return_value.create_stock_out = AsyncMock(return_value=created)
        response = await client.post(
            "/stock-out", json={"product_id": 3, "quantity": 5, "destination": "Store 12"}
        )

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    assert service_cls.return_value.create_stock_out.call_args.kwargs["requester"] is sales


async def test_approve_without_body(client, act_as, stock_out_factory):
    act_as(Role.WAREHOUSE_MANAGER, 5)
    approved = StockOutResponse.model_validate(
        stock_out_factory(status=StockOutStatus.APPROVED, approved_by=5)
    )

    with patch("wms.features.stock_out.routes.StockOutService") as service_cls:
        service_cls.return_value.approve_stock_out = AsyncMock(return_value=approved)
        response = await client.post("/stock-out/1/approve")

    assert response.status_code == 200
    assert service_cls.return_value.approve_stock_out.call_args.kwargs["approved_quantity"] is None


async def test_field_operator_cannot_process(client, act_as):
    act_as(Role.FIELD_OPERATOR)

    response = await client.post("/stock-out/1/process", json=PROCESS_BODY)

    assert response.status_code == 403


async def test_process_returns_details(client, act_as, stock_out_factory):
    act_as(Role.WAREHOUSE_MANAGER, 5)
    stock_out = stock_out_factory(status=StockOutStatus.COMPLETED, processed_by=5)
    done = StockOutDetailedResponse.model_validate(stock_out)

    with patch("wms.features.stock_out.routes.StockOutService") as service_cls:
        service_cls.return_value.process_stock_out = AsyncMock(return_value=done)
        response = await client.post("/stock-out/1/process", json=PROCESS_BODY)

    assert response.status_code == 200
    assert response.json()["details"] == []
    request = service_cls.return_value.process_stock_out.call_args.kwargs["request"]
    assert request.deductions[0].barcode == "1001001"


async def test_insufficient_stock_is_problem_response(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER, 5)

    with patch("wms.features.stock_out.routes.StockOutService") as service_cls:
        service_cls.return_value.process_stock_out = AsyncMock(
            side_effect=InsufficientStockError(
                message="Scanned 24 unit(s) but 30 are required",
                details={"scanned": 24, "required": 30},
            )
        )
        response = await client.post("/stock-out/1/process", json=PROCESS_BODY)

    assert response.status_code == 409
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["type"].endswith("/errors/insufficient-stock")
    assert body["context"] == {"scanned": 24, "required": 30}


async def test_empty_deductions_rejected(client, act_as):
    act_as(Role.WAREHOUSE_MANAGER)

    response = await client.post("/stock-out/1/process", json={"deductions": []})

    assert response.status_code == 422
