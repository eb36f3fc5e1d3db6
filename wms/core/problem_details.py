"""RFC 7807 ``application/problem+json`` bodies.

The web client and the scanner app show ``detail`` to the operator and keep
``request_id`` for support tickets; ``code`` and ``context`` drive retries
(e.g. the current status after an INVALID_TRANSITION).
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from wms.core.logging import request_id_ctx

ERROR_TYPE_BASE = "/errors"

# Codes whose URI slug is not simply the kebab-cased code.
_SLUG_OVERRIDES = {
    "VALIDATION_ERROR": "validation",
    "DATABASE_ERROR": "database",
    "INTERNAL_ERROR": "internal",
    "HTTP_ERROR": "http",
}


def problem_type(code: str) -> str:
    """``INSUFFICIENT_STOCK`` -> ``/errors/insufficient-stock``."""
    slug = _SLUG_OVERRIDES.get(code, code.lower().replace("_", "-"))
    return f"{ERROR_TYPE_BASE}/{slug}"


class ProblemDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
    code: str | None = None
    request_id: str | None = None
    # 422 only: one entry per offending field
    errors: list[dict[str, Any]] | None = None
    context: dict[str, Any] | None = None


class ProblemDetailResponse(JSONResponse):
    media_type = "application/problem+json"


def problem_response(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    context: dict[str, Any] | None = None,
) -> ProblemDetailResponse:
    """Render a problem body for the current request.

    ``instance`` and ``request_id`` come from the correlation context set by
    the request middleware; empty ``context`` is omitted.
    """
    request_id = request_id_ctx.get()
    problem = ProblemDetail(
        type=problem_type(error_code),
        title=title,
        status=status,
        detail=detail,
        instance=f"/requests/{request_id}" if request_id else None,
        code=error_code,
        request_id=request_id,
        errors=errors,
        context=context or None,
    )
    return ProblemDetailResponse(
        status_code=status,
        content=problem.model_dump(mode="json", exclude_none=True),
    )
