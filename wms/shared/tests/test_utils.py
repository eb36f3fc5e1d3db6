"""Tests for pagination helpers and status transitions."""

from enum import Enum

import pytest
from sqlalchemy import select

from wms.core.exceptions import InvalidTransitionError
from wms.features.warehouses.models import Warehouse
from wms.shared import (
    PaginationParams,
    fetch_page,
    is_valid_transition,
    paginate_response,
    validate_transition,
)


class Light(str, Enum):
    RED = "red"
    GREEN = "green"
    AMBER = "amber"


TRANSITIONS = {
    Light.RED: {Light.GREEN},
    Light.GREEN: {Light.AMBER},
    Light.AMBER: {Light.RED},
}


class TestPagination:
    def test_offset(self) -> None:
        params = PaginationParams(page=3, page_size=25)

        assert (params.offset, params.limit) == (50, 25)

    @pytest.mark.parametrize(("total", "pages"), [(0, 0), (1, 1), (20, 1), (21, 2)])
    def test_page_count(self, total: int, pages: int) -> None:
        response = paginate_response([], total, PaginationParams(page_size=20))

        assert response.pages == pages

    async def test_fetch_page(self, mock_db, make_result) -> None:
        rows = [Warehouse(id=1, name="Main")]
        mock_db.execute.side_effect = [make_result(41), make_result(scalars=rows)]

        page, total = await fetch_page(
            mock_db, select(Warehouse), PaginationParams(page=2, page_size=20), Warehouse.name
        )

        assert (page, total) == (rows, 41)
        page_sql = str(mock_db.execute.call_args_list[1].args[0])
        assert "ORDER BY warehouse.name" in page_sql
        assert "LIMIT" in page_sql


class TestTransitions:
    def test_allowed(self) -> None:
        assert is_valid_transition(TRANSITIONS, Light.RED, Light.GREEN)
        validate_transition(TRANSITIONS, Light.GREEN, Light.AMBER, "light", 1)

    def test_rejected_with_context(self) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            validate_transition(TRANSITIONS, Light.RED, Light.AMBER, "light", 7)

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {
            "entity": "light",
            "entity_id": 7,
            "current_status": "red",
            "requested_status": "amber",
            "allowed": ["green"],
        }
