"""Profile management service."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.profiles.models import Profile, Role
from wms.features.profiles.schemas import (
    CustomerRegistration,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from wms.shared import PaginatedResponse, PaginationParams, fetch_page, paginate_response

logger = get_logger(__name__)

# Fields a non-admin may change on their own profile
SELF_EDITABLE_FIELDS = frozenset({"name", "phone", "company"})


class ProfileService:
    """Create, query and administer application profiles."""

    async def _ensure_unique(
        self,
        db: AsyncSession,
        username: str,
        external_id: str | None,
    ) -> None:
        stmt = select(Profile.id).where(Profile.username == username)
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(
                message=f"Username '{username}' is already taken",
                details={"username": username},
            )
        if external_id is not None:
            stmt = select(Profile.id).where(Profile.external_id == external_id)
            if (await db.execute(stmt)).first() is not None:
                raise ConflictError(
                    message="A profile is already linked to this identity",
                    details={"external_id": external_id},
                )

    async def _get(self, db: AsyncSession, profile_id: int) -> Profile:
        profile = await db.get(Profile, profile_id)
        if profile is None:
            raise NotFoundError(message=f"Profile not found: {profile_id}")
        return profile

    async def create_profile(self, db: AsyncSession, data: ProfileCreate) -> ProfileResponse:
        """Create a profile with any role (admin operation).

        Raises:
            ConflictError: If username or external_id already exists.
        """
        await self._ensure_unique(db, data.username, data.external_id)

        profile = Profile(
            username=data.username,
            external_id=data.external_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            role=data.role.value,
            active=True,
        )
        db.add(profile)
        await db.flush()
        await db.refresh(profile)

        logger.info(
            "profiles.profile_created",
            profile_id=profile.id,
            username=profile.username,
            role=profile.role,
        )
        return ProfileResponse.model_validate(profile)

    async def register_customer(
        self,
        db: AsyncSession,
        data: CustomerRegistration,
    ) -> ProfileResponse:
        """Self-service signup; always creates a customer profile."""
        await self._ensure_unique(db, data.username, data.external_id)

        profile = Profile(
            username=data.username,
            external_id=data.external_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            role=Role.CUSTOMER.value,
            active=True,
        )
        db.add(profile)
        await db.flush()
        await db.refresh(profile)

        logger.info("profiles.customer_registered", profile_id=profile.id)
        return ProfileResponse.model_validate(profile)

    async def list_profiles(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        role: Role | None = None,
        active: bool | None = None,
        search: str | None = None,
    ) -> PaginatedResponse[ProfileResponse]:
        """List profiles filtered by role, active flag and free text."""
        stmt = select(Profile)
        if role is not None:
            stmt = stmt.where(Profile.role == role.value)
        if active is not None:
            stmt = stmt.where(Profile.active == active)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Profile.username.ilike(pattern),
                    Profile.name.ilike(pattern),
                    Profile.email.ilike(pattern),
                )
            )

        rows, total = await fetch_page(db, stmt, pagination, Profile.username)
        return paginate_response(
            [ProfileResponse.model_validate(p) for p in rows], total, pagination
        )

    async def get_profile(self, db: AsyncSession, profile_id: int) -> ProfileResponse:
        """Get a single profile.

        Raises:
            NotFoundError: If the profile does not exist.
        """
        return ProfileResponse.model_validate(await self._get(db, profile_id))

    async def update_profile(
        self,
        db: AsyncSession,
        profile_id: int,
        data: ProfileUpdate,
        actor: Profile,
    ) -> ProfileResponse:
        """Update contact fields.

        Admins may edit any profile; others only their own name, phone and
        company.

        Raises:
            ForbiddenError: Non-admin editing another profile or restricted fields.
        """
        changes = data.model_dump(exclude_unset=True)

        if actor.role != Role.ADMIN.value:
            if actor.id != profile_id:
                raise ForbiddenError(message="You can only edit your own profile")
            restricted = set(changes) - SELF_EDITABLE_FIELDS
            if restricted:
                raise ForbiddenError(
                    message="Only administrators can change these fields",
                    details={"fields": sorted(restricted)},
                )

        profile = await self._get(db, profile_id)
        for field, value in changes.items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)

        logger.info(
            "profiles.profile_updated",
            profile_id=profile_id,
            fields=sorted(changes),
        )
        return ProfileResponse.model_validate(profile)

    async def change_role(
        self,
        db: AsyncSession,
        profile_id: int,
        role: Role,
        actor: Profile,
    ) -> ProfileResponse:
        """Assign a new role to a profile.

        Raises:
            ValidationError: If an admin tries to demote themself.
        """
        if actor.id == profile_id and role is not Role.ADMIN:
            raise ValidationError(message="Administrators cannot demote themselves")

        profile = await self._get(db, profile_id)
        previous = profile.role
        profile.role = role.value
        await db.flush()
        await db.refresh(profile)

        logger.info(
            "profiles.role_changed",
            profile_id=profile_id,
            previous_role=previous,
            new_role=role.value,
        )
        return ProfileResponse.model_validate(profile)

    async def set_active(
        self,
        db: AsyncSession,
        profile_id: int,
        active: bool,
        actor: Profile,
    ) -> ProfileResponse:
        """Activate or deactivate a profile.

        Raises:
            ValidationError: If an admin tries to deactivate themself.
        """
        if actor.id == profile_id and not active:
            raise ValidationError(message="You cannot deactivate your own profile")

        profile = await self._get(db, profile_id)
        profile.active = active
        await db.flush()
        await db.refresh(profile)

        logger.info("profiles.active_changed", profile_id=profile_id, active=active)
        return ProfileResponse.model_validate(profile)
