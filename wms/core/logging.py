"""structlog setup. Every event carries the request id and the acting profile."""

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any

import structlog

from wms.core.config import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
# Set once get_current_profile has resolved the X-Profile-ID header.
profile_id_ctx: ContextVar[int | None] = ContextVar("profile_id", default=None)

_CORRELATION: tuple[tuple[str, ContextVar[Any]], ...] = (
    ("request_id", request_id_ctx),
    ("actor_id", profile_id_ctx),
)


def add_correlation(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Stamp request and actor ids unless the call site passed its own."""
    for key, var in _CORRELATION:
        value = var.get()
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging() -> None:
    """Configure structlog once at startup, plus uvicorn's stdlib loggers.

    SQL echo stays off unless ``debug`` is on; at INFO it would drown the
    workflow events.
    """
    settings = get_settings()
    level = logging.getLevelName(settings.log_level)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_correlation,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
