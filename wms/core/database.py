"""Engine, declarative base and the unit-of-work session scope."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from wms.core.config import get_settings
from wms.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base; `wms.models` imports every table onto its metadata."""


@lru_cache
def get_engine() -> AsyncEngine:
    """Process-wide engine. Disposed by the app lifespan and the CLI scripts."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


@lru_cache
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    # Rows stay readable after commit; responses are built from them.
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def transaction() -> AsyncIterator[AsyncSession]:
    """Open a session that commits when the block exits cleanly.

    Any exception rolls back everything flushed inside the block, which is
    what keeps stock-in and stock-out processing all-or-nothing.
    """
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.info("db.rolled_back", error_type=type(exc).__name__)
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one transaction per request."""
    async with transaction() as session:
        yield session
