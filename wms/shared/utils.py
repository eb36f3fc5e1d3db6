"""Pagination helpers for the list endpoints."""

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.shared.schemas import PaginatedResponse, PaginationParams

T = TypeVar("T")


def paginate_response(
    items: list[T],
    total: int,
    pagination: PaginationParams,
) -> PaginatedResponse[T]:
    """Wrap one page of response models with the counts for the pager."""
    return PaginatedResponse[T](
        items=items,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
        pages=-(-total // pagination.page_size),
    )


async def fetch_page(
    db: AsyncSession,
    stmt: Select[Any],
    pagination: PaginationParams,
    *order_by: Any,
) -> tuple[Sequence[Any], int]:
    """Count a filtered select, then fetch one ordered page of ORM rows.

    Args:
        db: Database session.
        stmt: Filtered select (no ordering/limit applied yet).
        pagination: Page and page size.
        *order_by: Ordering clauses applied before offset/limit.

    Returns:
        Tuple of (rows for the page, total matching rows).
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    page_stmt = stmt.order_by(*order_by).offset(pagination.offset).limit(pagination.limit)
    rows = (await db.execute(page_stmt)).scalars().all()
    return rows, total
