"""Pagination schemas used by every list endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from wms.core.config import get_settings

T = TypeVar("T")

_settings = get_settings()


class PaginationParams(BaseModel):
    """`?page=&page_size=` query pair.

    Oversized pages are clamped to `max_page_size` rather than rejected so
    scanners and spreadsheets asking for "everything" still get a page.
    """

    page: int = Field(1, ge=1, description="1-indexed page")
    page_size: int = Field(_settings.default_page_size, ge=1, description="Rows per page")

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, value: int) -> int:
        return min(value, get_settings().max_page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of rows plus the counts a table view needs to render pagers."""

    items: list[T]
    total: int = Field(..., ge=0, description="Rows matching the filters")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    pages: int = Field(..., ge=0, description="0 when nothing matched")
