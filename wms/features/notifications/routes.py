"""API routes for the caller's notification inbox."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.schemas import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from wms.features.notifications.service import NotificationService
from wms.features.profiles.deps import get_current_profile
from wms.features.profiles.models import Profile
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=PaginatedResponse[NotificationResponse],
    summary="List my notifications",
    description="""
Notifications addressed to the caller plus those addressed to the caller's
role, newest first. Clients poll this endpoint (there is no push channel).
""",
)
async def list_notifications(
    pagination: PaginationParams = Depends(),
    unread_only: bool = Query(False, description="Only unread notifications"),
    action_type: NotificationAction | None = Query(None, description="Filter by action"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> PaginatedResponse[NotificationResponse]:
    return await NotificationService().list_notifications(
        db=db,
        profile=profile,
        pagination=pagination,
        unread_only=unread_only,
        action_type=action_type,
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread count")
async def unread_count(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> UnreadCountResponse:
    count = await NotificationService().unread_count(db=db, profile=profile)
    return UnreadCountResponse(unread=count)


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark all as read")
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> MarkAllReadResponse:
    updated = await NotificationService().mark_all_read(db=db, profile=profile)
    return MarkAllReadResponse(updated=updated)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark one notification as read",
)
async def mark_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> NotificationResponse:
    return await NotificationService().mark_read(
        db=db, profile=profile, notification_id=notification_id
    )
