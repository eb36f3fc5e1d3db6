"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.config import get_settings
from wms.core.database import get_db
from wms.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Created by the first migration; absent means `alembic upgrade head` never ran.
_SCHEMA_PROBE = text("SELECT to_regclass('public.profile') IS NOT NULL")


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded", "unhealthy"]
    app_name: str
    app_env: str
    database: Literal["connected", "disconnected"] | None = None
    schema_ready: bool | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe; never touches the database."""
    settings = get_settings()
    return HealthResponse(status="ok", app_name=settings.app_name, app_env=settings.app_env)


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Readiness probe.

    ``degraded`` means PostgreSQL answers but the warehouse tables are not
    migrated yet; ``unhealthy`` means it does not answer at all.
    """
    settings = get_settings()
    report = {"app_name": settings.app_name, "app_env": settings.app_env}

    try:
        schema_ready = bool((await db.execute(_SCHEMA_PROBE)).scalar())
    except SQLAlchemyError as e:
        logger.error("health.database_disconnected", error_type=type(e).__name__, exc_info=True)
        return HealthResponse(status="unhealthy", database="disconnected", **report)

    if not schema_ready:
        logger.warning("health.schema_missing")
    return HealthResponse(
        status="ok" if schema_ready else "degraded",
        database="connected",
        schema_ready=schema_ready,
        **report,
    )
