"""Warehouse errors and the handlers that turn them into Problem Details.

Services raise the ``WMSError`` subclasses below and never build HTTP
responses themselves. Anything else that escapes a route (request
validation, SQLAlchemy failures, plain bugs) is mapped here as well, so
every error body has the same shape.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from wms.core.logging import get_logger
from wms.core.problem_details import ProblemDetailResponse, problem_response

logger = get_logger(__name__)


class WMSError(Exception):
    """Base warehouse error.

    Subclasses pin ``code`` and ``status_code``; ``details`` is echoed to the
    client as the problem ``context``.
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def title(self) -> str:
        return self.code.replace("_", " ").title()


class BadRequestError(WMSError):
    code = "BAD_REQUEST"
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(WMSError):
    """No active profile behind the X-Profile-ID header."""

    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(WMSError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Operation not permitted for this role"


class NotFoundError(WMSError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ConflictError(WMSError):
    """Duplicate barcode, username, order push and similar."""

    code = "CONFLICT"
    status_code = 409
    default_message = "Resource conflict"


class InvalidTransitionError(ConflictError):
    """Status machine refused the change; ``details`` lists what is allowed."""

    code = "INVALID_TRANSITION"
    default_message = "Invalid status transition"


class InsufficientStockError(ConflictError):
    code = "INSUFFICIENT_STOCK"
    default_message = "Insufficient stock"


class ValidationError(WMSError):
    """Well-formed request that breaks a business rule (inactive product, ...)."""

    code = "VALIDATION_ERROR"
    status_code = 422
    default_message = "Validation failed"


class DatabaseError(WMSError):
    code = "DATABASE_ERROR"
    default_message = "Database operation failed"


async def wms_exception_handler(_request: Request, exc: WMSError) -> ProblemDetailResponse:
    server_side = exc.status_code >= 500
    (logger.error if server_side else logger.warning)(
        "app.error_handled",
        error=exc.message,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
        exc_info=server_side,
    )
    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        error_code=exc.code,
        context=exc.details,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ProblemDetailResponse:
    """Unknown routes, wrong methods and other framework-raised errors."""
    logger.info("app.http_error", status_code=exc.status_code, path=request.url.path)
    return problem_response(
        status=exc.status_code,
        title="HTTP Error",
        detail=str(exc.detail),
        error_code="NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR",
    )


def field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors to ``field``/``message``/``type`` triples.

    The ``body`` prefix is dropped so form fields match the JSON keys the
    client sent (``quantity``, ``batches.0.location_id``).
    """
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": str(error.get("msg", "Validation failed")),
            "type": str(error.get("type", "unknown")),
        }
        for error in exc.errors()
    ]


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ProblemDetailResponse:
    errors = field_errors(exc)
    logger.warning(
        "app.validation_error",
        path=request.url.path,
        fields=[e["field"] for e in errors],
    )
    return problem_response(
        status=422,
        title="Validation Error",
        detail=f"Request validation failed with {len(errors)} error(s)",
        error_code="VALIDATION_ERROR",
        errors=errors,
    )


async def integrity_exception_handler(
    request: Request, exc: IntegrityError
) -> ProblemDetailResponse:
    """Constraint violations a concurrent request won past the service checks."""
    logger.warning(
        "app.integrity_error",
        path=request.url.path,
        error=str(exc.orig if exc.orig is not None else exc),
    )
    return problem_response(
        status=409,
        title="Conflict",
        detail="The request conflicts with existing data (duplicate or missing reference)",
        error_code="CONFLICT",
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> ProblemDetailResponse:
    logger.error(
        "app.database_error",
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return problem_response(
        status=500,
        title="Database Error",
        detail="A database operation failed; retry or quote the request_id to support",
        error_code="DATABASE_ERROR",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> ProblemDetailResponse:
    logger.error(
        "app.unhandled_error",
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred; quote the request_id to support",
        error_code="INTERNAL_ERROR",
    )


_HANDLERS: tuple[tuple[type[Exception], Any], ...] = (
    (WMSError, wms_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (IntegrityError, integrity_exception_handler),
    (SQLAlchemyError, database_exception_handler),
    (Exception, unhandled_exception_handler),
)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)
