"""Shared utilities used across 3+ features."""

from wms.shared.models import CreatedAtMixin, TimestampMixin
from wms.shared.schemas import PaginatedResponse, PaginationParams
from wms.shared.transitions import is_valid_transition, validate_transition
from wms.shared.utils import fetch_page, paginate_response

__all__ = [
    "CreatedAtMixin",
    "PaginatedResponse",
    "PaginationParams",
    "TimestampMixin",
    "fetch_page",
    "is_valid_transition",
    "paginate_response",
    "validate_transition",
]
