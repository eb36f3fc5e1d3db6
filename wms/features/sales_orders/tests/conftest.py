"""Test fixtures for the sales order module."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from wms.features.sales_orders.models import OrderStatus, SalesOrder, SalesOrderItem
from wms.features.sales_orders.service import SalesOrderService


@pytest.fixture
def order_factory():
    """Build a detached two-line order."""

    def build(
        order_id: int = 11,
        status: OrderStatus = OrderStatus.CONFIRMED,
        **overrides,
    ) -> SalesOrder:
        stamp = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)
        values = {
            "id": order_id,
            "sales_order_number": "SO-20260302-0001",
            "customer_name": "Meera Rao",
            "customer_company": "Rao Retail",
            "status": status.value,
            "order_date": date(2026, 3, 2),
            "total_amount": Decimal("47.48"),
            "pushed_to_stockout": False,
            "created_by": 7,
            "created_at": stamp,
            "updated_at": stamp,
            "items": [
                SalesOrderItem(id=1, product_id=3, quantity=3, unit_price=Decimal("12.50")),
                SalesOrderItem(
                    id=2,
                    product_id=8,
                    quantity=2,
                    unit_price=Decimal("4.99"),
                    requirements="Gift wrap",
                ),
            ],
        }
        values.update(overrides)
        return SalesOrder(**values)

    return build


@pytest.fixture
def service() -> SalesOrderService:
    svc = SalesOrderService()
    svc.catalog = AsyncMock()
    svc.notifications = AsyncMock()
    return svc
