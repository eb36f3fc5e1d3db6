"""API routes for profiles and customer registration."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.profiles.deps import get_current_profile, require_admin
from wms.features.profiles.models import Profile, Role
from wms.features.profiles.schemas import (
    ActiveChange,
    CustomerRegistration,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    RoleChange,
)
from wms.features.profiles.service import ProfileService
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post(
    "/register",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register as a customer",
    description="""
Self-service registration. The new profile always gets the `customer` role;
staff accounts are created by an administrator via `POST /profiles`.
""",
)
async def register_customer(
    data: CustomerRegistration,
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ProfileService().register_customer(db=db, data=data)


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get the calling profile",
)
async def get_me(profile: Profile = Depends(get_current_profile)) -> ProfileResponse:
    return ProfileResponse.model_validate(profile)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile (admin)",
)
async def create_profile(
    data: ProfileCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> ProfileResponse:
    return await ProfileService().create_profile(db=db, data=data)


@router.get(
    "",
    response_model=PaginatedResponse[ProfileResponse],
    summary="List profiles (admin)",
    description="""
List profiles ordered by username.

**Filtering**:
- `role`: one of admin, warehouse_manager, field_operator, sales_operator, customer
- `active`: true/false
- `search`: case-insensitive match on username, name or email
""",
)
async def list_profiles(
    pagination: PaginationParams = Depends(),
    role: Role | None = Query(None, description="Filter by role"),
    active: bool | None = Query(None, description="Filter by active flag"),
    search: str | None = Query(None, max_length=100, description="Free-text search"),
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> PaginatedResponse[ProfileResponse]:
    return await ProfileService().list_profiles(
        db=db, pagination=pagination, role=role, active=active, search=search
    )


@router.get(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Get a profile (admin)",
)
async def get_profile(
    profile_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> ProfileResponse:
    return await ProfileService().get_profile(db=db, profile_id=profile_id)


@router.patch(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Update a profile",
    description="""
Admins may update any profile. Other users may update only their own
`name`, `phone` and `company`.
""",
)
async def update_profile(
    profile_id: int,
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Profile = Depends(get_current_profile),
) -> ProfileResponse:
    return await ProfileService().update_profile(
        db=db, profile_id=profile_id, data=data, actor=actor
    )


@router.put(
    "/{profile_id}/role",
    response_model=ProfileResponse,
    summary="Change a profile's role (admin)",
)
async def change_role(
    profile_id: int,
    data: RoleChange,
    db: AsyncSession = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> ProfileResponse:
    return await ProfileService().change_role(
        db=db, profile_id=profile_id, role=data.role, actor=admin
    )


@router.put(
    "/{profile_id}/active",
    response_model=ProfileResponse,
    summary="Activate or deactivate a profile (admin)",
)
async def set_active(
    profile_id: int,
    data: ActiveChange,
    db: AsyncSession = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> ProfileResponse:
    return await ProfileService().set_active(
        db=db, profile_id=profile_id, active=data.active, actor=admin
    )
