"""Tests for sales order schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from wms.features.sales_orders.schemas import OrderCreate, OrderItemInput


def test_price_defaults_to_zero() -> None:
    assert OrderItemInput(product_id=3, quantity=1).unit_price == Decimal("0")


@pytest.mark.parametrize("price", ["-1", "12.345"])
def test_invalid_prices(price: str) -> None:
    with pytest.raises(ValidationError):
        OrderItemInput(product_id=3, quantity=1, unit_price=price)


class TestOrderCreate:
    def test_needs_items(self) -> None:
        with pytest.raises(ValidationError):
            OrderCreate(customer_name="Meera Rao", items=[])

    def test_rejects_bad_email(self) -> None:
        with pytest.raises(ValidationError):
            OrderCreate(
                customer_name="Meera Rao",
                customer_email="not-an-email",
                items=[{"product_id": 3, "quantity": 1}],
            )

    def test_valid(self) -> None:
        data = OrderCreate(
            customer_name="Meera Rao",
            customer_email="meera@example.com",
            items=[{"product_id": 3, "quantity": 2, "unit_price": "9.99"}],
        )

        assert data.order_date is None
        assert data.items[0].unit_price == Decimal("9.99")
