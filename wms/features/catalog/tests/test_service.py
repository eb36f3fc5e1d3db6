"""Unit tests for the catalog service."""

import pytest

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.features.catalog.schemas import ProductCreate, ProductUpdate
from wms.features.catalog.service import CatalogService, can_see_inactive
from wms.features.profiles.models import Role


class TestVisibility:
    def test_staff_can_see_inactive(self, profile_factory) -> None:
        assert can_see_inactive(profile_factory(Role.FIELD_OPERATOR)) is True

    def test_customers_and_anonymous_cannot(self, profile_factory) -> None:
        assert can_see_inactive(profile_factory(Role.CUSTOMER)) is False
        assert can_see_inactive(None) is False

    async def test_inactive_product_hidden_from_public(self, mock_db, product_factory) -> None:
        mock_db.get.return_value = product_factory(is_active=False)

        with pytest.raises(NotFoundError):
            await CatalogService().get_product(mock_db, 1)

        result = await CatalogService().get_product(mock_db, 1, include_inactive=True)
        assert result.is_active is False


class TestActiveProducts:
    async def test_reports_unknown_and_inactive(
        self, mock_db, make_result, product_factory
    ) -> None:
        mock_db.execute.return_value = make_result(
            scalars=[product_factory(1), product_factory(2, is_active=False)]
        )

        with pytest.raises(ValidationError) as exc_info:
            await CatalogService().active_products(mock_db, [1, 2, 3])

        assert exc_info.value.details == {"unknown": [3], "inactive": [2]}

    async def test_returns_products_by_id(self, mock_db, make_result, product_factory) -> None:
        mock_db.execute.return_value = make_result(scalars=[product_factory(1)])

        products = await CatalogService().active_products(mock_db, [1, 1])

        assert list(products) == [1]


class TestWrites:
    async def test_duplicate_sku_conflicts(self, mock_db, make_result) -> None:
        mock_db.execute.return_value = make_result((4,))

        with pytest.raises(ConflictError):
            await CatalogService().create_product(
                mock_db, ProductCreate(name="Shirt", sku="shirt-1"), created_by=1
            )

    async def test_deactivate_keeps_row(self, mock_db, product_factory) -> None:
        product = product_factory()
        mock_db.get.return_value = product

        result = await CatalogService().deactivate_product(mock_db, 1)

        assert result.is_active is False
        mock_db.delete.assert_not_called()

    async def test_update_same_sku_skips_uniqueness_check(
        self, mock_db, product_factory
    ) -> None:
        mock_db.get.return_value = product_factory(1, sku="SHIRT-001")

        result = await CatalogService().update_product(
            mock_db, 1, ProductUpdate(sku="shirt-001", category="Shirts")
        )

        assert result.category == "Shirts"
        mock_db.execute.assert_not_awaited()


async def test_product_stock_flags_out_of_stock(mock_db, make_result, product_factory):
    mock_db.execute.return_value = make_result(
        rows=[(product_factory(1), 48), (product_factory(2), 0)]
    )

    rows = await CatalogService().product_stock(mock_db)

    assert [(r.id, r.in_stock_quantity, r.is_out_of_stock) for r in rows] == [
        (1, 48, False),
        (2, 0, True),
    ]
