"""Core infrastructure: config, database, logging, middleware, exceptions, security."""

from wms.core.config import Settings, get_settings
from wms.core.database import Base, get_db
from wms.core.logging import get_logger, request_id_ctx

__all__ = [
    "Base",
    "Settings",
    "get_db",
    "get_logger",
    "get_settings",
    "request_id_ctx",
]
