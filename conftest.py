"""Shared pytest fixtures for warehouse tests.

Unit and route tests never touch PostgreSQL: the session is an AsyncMock
and the caller's identity is injected by overriding the profile
dependencies.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from wms.core.database import get_db
from wms.features.profiles.deps import get_current_profile, get_optional_profile
from wms.features.profiles.models import Profile, Role
from wms.main import app

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


@pytest.fixture
def make_result() -> Callable[..., MagicMock]:
    """Build fake SQLAlchemy Results returning the given values."""

    def build(value=None, scalars=None, rows=None) -> MagicMock:
        result = MagicMock()
        result.scalar_one_or_none.return_value = value
        result.scalar_one.return_value = value
        result.scalar.return_value = value
        result.first.return_value = value
        result.scalars.return_value.all.return_value = scalars or []
        result.all.return_value = rows or []
        return result

    return build


@pytest.fixture
def mock_db() -> AsyncMock:
    """Async session double; `add` is synchronous on a real session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    return db


@pytest.fixture
def profile_factory() -> Callable[..., Profile]:
    """Build detached Profile rows for a role."""

    def build(role: Role = Role.ADMIN, profile_id: int = 1, **overrides) -> Profile:
        values = {
            "id": profile_id,
            "username": f"{role.value}-{profile_id}",
            "name": f"{role.value.replace('_', ' ').title()} {profile_id}",
            "email": f"{role.value}{profile_id}@example.com",
            "role": role.value,
            "active": True,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return Profile(**values)

    return build


@pytest.fixture
async def client(mock_db: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the database session mocked out."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def act_as(client: AsyncClient, profile_factory) -> Callable[..., Profile]:
    """Make subsequent requests run as a profile with the given role."""

    def use(role: Role, profile_id: int = 1, **overrides) -> Profile:
        profile = profile_factory(role, profile_id, **overrides)

        async def current() -> Profile:
            return profile

        app.dependency_overrides[get_current_profile] = current
        app.dependency_overrides[get_optional_profile] = current
        return profile

    return use
