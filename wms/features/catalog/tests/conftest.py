"""Test fixtures for the catalog module."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from wms.features.catalog.models import Product


@pytest.fixture
def product_factory():
    """Build detached Product rows."""

    def build(product_id: int = 1, **overrides) -> Product:
        stamp = datetime(2026, 1, 5, tzinfo=UTC)
        values = {
            "id": product_id,
            "name": f"Cotton Shirt {product_id}",
            "sku": f"SHIRT-{product_id:03d}",
            "category": "Apparel",
            "hsn_code": "6205",
            "gst_rate": Decimal("5.00"),
            "is_active": True,
            "created_at": stamp,
            "updated_at": stamp,
        }
        values.update(overrides)
        return Product(**values)

    return build
