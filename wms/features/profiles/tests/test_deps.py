"""Tests for request identity dependencies."""

import pytest

from wms.core.exceptions import ForbiddenError, UnauthorizedError
from wms.core.logging import profile_id_ctx
from wms.features.profiles.deps import (
    get_current_profile,
    get_optional_profile,
    parse_profile_id,
    require_roles,
    require_staff,
)
from wms.features.profiles.models import Role


class TestGetCurrentProfile:
    """Resolving the X-Profile-ID header."""

    async def test_missing_header_is_unauthorized(self, mock_db) -> None:
        with pytest.raises(UnauthorizedError):
            await get_current_profile(x_profile_id=None, db=mock_db)
        mock_db.execute.assert_not_awaited()

    async def test_non_numeric_header_is_unauthorized(self, mock_db) -> None:
        with pytest.raises(UnauthorizedError):
            await get_current_profile(x_profile_id="abc", db=mock_db)

    @pytest.mark.parametrize("header", ["²", "٣", "0", "99999999999", "-4"])
    async def test_unusable_id_is_unauthorized_without_query(self, mock_db, header) -> None:
        with pytest.raises(UnauthorizedError):
            await get_current_profile(x_profile_id=header, db=mock_db)
        mock_db.execute.assert_not_awaited()

    @pytest.mark.parametrize(
        ("header", "expected"),
        [(" 42 ", 42), ("2147483647", 2**31 - 1), ("2147483648", None), ("²", None)],
    )
    def test_parse_profile_id(self, header: str, expected: int | None) -> None:
        assert parse_profile_id(header) == expected

    async def test_inactive_profile_is_unauthorized(
        self, mock_db, make_result, profile_factory
    ) -> None:
        mock_db.execute.return_value = make_result(profile_factory(active=False))

        with pytest.raises(UnauthorizedError):
            await get_current_profile(x_profile_id="1", db=mock_db)

    async def test_active_profile_is_resolved_and_bound_to_logs(
        self, mock_db, make_result, profile_factory
    ) -> None:
        profile = profile_factory(Role.FIELD_OPERATOR, 42)
        mock_db.execute.return_value = make_result(profile)

        token = profile_id_ctx.set(None)
        try:
            assert await get_current_profile(x_profile_id="42", db=mock_db) is profile
            assert profile_id_ctx.get() == 42
        finally:
            profile_id_ctx.reset(token)

    async def test_optional_profile_allows_anonymous(self, mock_db) -> None:
        assert await get_optional_profile(x_profile_id=None, db=mock_db) is None


class TestRequireRoles:
    """Role gates built by require_roles."""

    async def test_admin_passes_any_staff_gate(self, profile_factory) -> None:
        admin = profile_factory(Role.ADMIN)
        assert await require_staff(profile=admin) is admin

    async def test_listed_role_passes(self, profile_factory) -> None:
        sales = profile_factory(Role.SALES_OPERATOR)
        assert await require_roles(Role.SALES_OPERATOR)(profile=sales) is sales

    async def test_other_role_is_forbidden(self, profile_factory) -> None:
        customer = profile_factory(Role.CUSTOMER)

        with pytest.raises(ForbiddenError) as exc_info:
            await require_staff(profile=customer)

        assert exc_info.value.details["role"] == "customer"
        assert "admin" in exc_info.value.details["allowed_roles"]

    async def test_customer_only_gate_excludes_admin(self, profile_factory) -> None:
        with pytest.raises(ForbiddenError):
            await require_roles(Role.CUSTOMER)(profile=profile_factory(Role.ADMIN))
