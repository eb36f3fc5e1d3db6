"""Request identity dependencies.

Authentication itself happens at the upstream gateway, which forwards the
caller's profile id in the ``X-Profile-ID`` header. These dependencies turn
that header into an active Profile and enforce role permissions.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.core.exceptions import ForbiddenError, UnauthorizedError
from wms.core.logging import get_logger, profile_id_ctx
from wms.features.profiles.models import Profile, Role

logger = get_logger(__name__)

PROFILE_HEADER = "X-Profile-ID"


# profile.id is a PostgreSQL integer column
MAX_PROFILE_ID = 2**31 - 1


def parse_profile_id(raw_id: str | None) -> int | None:
    """ASCII digits naming an id in the int4 range, otherwise None."""
    if raw_id is None:
        return None
    raw_id = raw_id.strip()
    if not (raw_id.isascii() and raw_id.isdigit()):
        return None
    profile_id = int(raw_id)
    return profile_id if 1 <= profile_id <= MAX_PROFILE_ID else None


async def _load_profile(db: AsyncSession, raw_id: str | None) -> Profile | None:
    profile_id = parse_profile_id(raw_id)
    if profile_id is None:
        return None

    stmt = select(Profile).where(Profile.id == profile_id)
    profile = (await db.execute(stmt)).scalar_one_or_none()
    if profile is None or not profile.active:
        return None

    profile_id_ctx.set(profile.id)
    return profile


async def get_current_profile(
    x_profile_id: str | None = Header(None, alias=PROFILE_HEADER),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """Resolve the calling profile.

    Raises:
        UnauthorizedError: Header missing, malformed, or profile unknown/inactive.
    """
    profile = await _load_profile(db, x_profile_id)
    if profile is None:
        logger.warning("profiles.identity_rejected", header_value=x_profile_id)
        raise UnauthorizedError(
            message=f"A valid {PROFILE_HEADER} header for an active profile is required"
        )
    return profile


async def get_optional_profile(
    x_profile_id: str | None = Header(None, alias=PROFILE_HEADER),
    db: AsyncSession = Depends(get_db),
) -> Profile | None:
    """Resolve the caller if identified; anonymous callers get None."""
    return await _load_profile(db, x_profile_id)


def require_roles(*roles: Role) -> Callable[..., Awaitable[Profile]]:
    """Build a dependency allowing only the given roles.

    Admin is allowed wherever any staff role is allowed.

    Args:
        *roles: Roles permitted to call the endpoint.

    Returns:
        Dependency returning the calling Profile.
    """
    allowed = {role.value for role in roles}
    if any(role is not Role.CUSTOMER for role in roles):
        allowed.add(Role.ADMIN.value)

    async def dependency(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.role not in allowed:
            logger.warning(
                "profiles.role_forbidden",
                profile_id=profile.id,
                role=profile.role,
                allowed=sorted(allowed),
            )
            raise ForbiddenError(
                details={"role": profile.role, "allowed_roles": sorted(allowed)}
            )
        return profile

    return dependency


require_admin = require_roles(Role.ADMIN)
require_manager = require_roles(Role.WAREHOUSE_MANAGER)
require_sales = require_roles(Role.SALES_OPERATOR)
require_staff = require_roles(
    Role.WAREHOUSE_MANAGER, Role.FIELD_OPERATOR, Role.SALES_OPERATOR
)
require_stock_submitter = require_roles(Role.FIELD_OPERATOR, Role.WAREHOUSE_MANAGER)
