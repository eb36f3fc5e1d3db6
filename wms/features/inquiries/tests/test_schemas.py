"""Tests for inquiry schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from wms.features.inquiries.schemas import InquiryConvert, InquirySubmit

ITEMS = [{"product_id": 3, "quantity": 40}]


class TestInquirySubmit:
    def test_normalizes_contact(self) -> None:
        data = InquirySubmit(
            customer_name="  Meera Rao ", customer_email=" Meera@Example.COM", items=ITEMS
        )

        assert data.customer_name == "Meera Rao"
        assert data.customer_email == "meera@example.com"

    def test_blank_name(self) -> None:
        with pytest.raises(ValidationError):
            InquirySubmit(customer_name="   ", customer_email="a@b.co", items=ITEMS)

    def test_needs_a_product_line(self) -> None:
        with pytest.raises(ValidationError):
            InquirySubmit(customer_name="Meera", customer_email="a@b.co", items=[])

    def test_quantity_positive(self) -> None:
        with pytest.raises(ValidationError):
            InquirySubmit(
                customer_name="Meera",
                customer_email="a@b.co",
                items=[{"product_id": 3, "quantity": 0}],
            )


def test_convert_prices_keyed_by_product() -> None:
    data = InquiryConvert(unit_prices={"3": "12.50"})

    assert data.unit_prices == {3: Decimal("12.50")}


def test_convert_rejects_negative_price() -> None:
    with pytest.raises(ValidationError):
        InquiryConvert(unit_prices={3: "-1"})
