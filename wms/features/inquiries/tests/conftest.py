"""Test fixtures for the inquiries module."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from wms.features.inquiries.models import InquiryStatus, SalesInquiry, SalesInquiryItem
from wms.features.inquiries.service import InquiryService


@pytest.fixture
def inquiry_factory():
    def build(
        inquiry_id: int = 5,
        status: InquiryStatus = InquiryStatus.NEW,
        **overrides,
    ) -> SalesInquiry:
        stamp = datetime(2026, 2, 28, 16, 45, tzinfo=UTC)
        values = {
            "id": inquiry_id,
            "customer_name": "Meera Rao",
            "customer_email": "meera@example.com",
            "customer_company": "Rao Retail",
            "status": status.value,
            "created_at": stamp,
            "updated_at": stamp,
            "items": [
                SalesInquiryItem(id=1, product_id=3, quantity=40),
                SalesInquiryItem(
                    id=2, product_id=8, quantity=10, specific_requirements="Navy only"
                ),
            ],
        }
        values.update(overrides)
        return SalesInquiry(**values)

    return build


@pytest.fixture
def service() -> InquiryService:
    """Service with catalog, notifications and orders mocked."""
    svc = InquiryService()
    svc.catalog = AsyncMock()
    svc.notifications = AsyncMock()
    svc.orders = AsyncMock()
    return svc


@pytest.fixture
def order_payload() -> dict:
    """Serialized order as returned when an inquiry is converted."""
    return {
        "id": 11,
        "sales_order_number": "SO-20260302-0001",
        "customer_name": "Meera Rao",
        "inquiry_id": 5,
        "status": "pending",
        "order_date": "2026-03-02",
        "total_amount": "0.00",
        "pushed_to_stockout": False,
        "created_by": 7,
        "items": [],
        "created_at": "2026-03-02T10:00:00Z",
        "updated_at": "2026-03-02T10:00:00Z",
    }
