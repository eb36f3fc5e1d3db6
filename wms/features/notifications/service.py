"""Notification service.

Other services call ``notify_user`` / ``notify_role`` inside their own
transaction so a notification is only persisted when the triggering change
commits.
"""

from typing import Any

from sqlalchemy import and_, exists, func, literal, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.exceptions import NotFoundError
from wms.core.logging import get_logger
from wms.features.notifications.models import (
    Notification,
    NotificationAction,
    NotificationRead,
)
from wms.features.notifications.schemas import NotificationResponse
from wms.features.profiles.models import Profile, Role
from wms.shared import PaginatedResponse, PaginationParams, fetch_page, paginate_response

logger = get_logger(__name__)


def _for_role(profile: Profile) -> Any:
    return and_(Notification.user_id.is_(None), Notification.role == profile.role)


def _visible_to(profile: Profile) -> Any:
    """Filter clause for notifications addressed to the profile or its role."""
    return or_(Notification.user_id == profile.id, _for_role(profile))


def _has_receipt(profile: Profile) -> Any:
    return exists().where(
        NotificationRead.notification_id == Notification.id,
        NotificationRead.profile_id == profile.id,
    )


def _read_by(profile: Profile) -> Any:
    """Read state of a visible notification as seen by ``profile``."""
    return or_(
        and_(Notification.user_id == profile.id, Notification.is_read.is_(True)),
        and_(Notification.user_id.is_(None), _has_receipt(profile)),
    )


def _as_response(notification: Notification, role_receipt: bool) -> NotificationResponse:
    response = NotificationResponse.model_validate(notification)
    if notification.user_id is None:
        response.is_read = role_receipt
    return response


class NotificationService:
    """Persist and query in-app notifications."""

    async def notify_user(
        self,
        db: AsyncSession,
        user_id: int,
        action: NotificationAction,
        title: str,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Queue a notification for a single profile."""
        notification = Notification(
            user_id=user_id,
            action_type=action.value,
            title=title,
            message=message,
            meta=metadata or {},
            is_read=False,
        )
        db.add(notification)
        await db.flush()

        logger.info(
            "notifications.user_notified",
            user_id=user_id,
            action_type=action.value,
        )
        return notification

    async def notify_role(
        self,
        db: AsyncSession,
        role: Role,
        action: NotificationAction,
        title: str,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Queue a notification visible to every profile holding ``role``."""
        notification = Notification(
            role=role.value,
            action_type=action.value,
            title=title,
            message=message,
            meta=metadata or {},
            is_read=False,
        )
        db.add(notification)
        await db.flush()

        logger.info(
            "notifications.role_notified",
            role=role.value,
            action_type=action.value,
        )
        return notification

    async def list_notifications(
        self,
        db: AsyncSession,
        profile: Profile,
        pagination: PaginationParams,
        unread_only: bool = False,
        action_type: NotificationAction | None = None,
    ) -> PaginatedResponse[NotificationResponse]:
        """List the caller's notifications, newest first."""
        stmt = select(Notification).where(_visible_to(profile))
        if unread_only:
            stmt = stmt.where(~_read_by(profile))
        if action_type is not None:
            stmt = stmt.where(Notification.action_type == action_type.value)

        rows, total = await fetch_page(
            db, stmt, pagination, Notification.created_at.desc(), Notification.id.desc()
        )
        receipts = await self._receipts(db, profile, [n.id for n in rows if n.user_id is None])
        return paginate_response(
            [_as_response(n, n.id in receipts) for n in rows], total, pagination
        )

    async def _receipts(
        self, db: AsyncSession, profile: Profile, notification_ids: list[int]
    ) -> set[int]:
        """Ids among ``notification_ids`` the profile has a read receipt for."""
        if not notification_ids:
            return set()
        stmt = select(NotificationRead.notification_id).where(
            NotificationRead.profile_id == profile.id,
            NotificationRead.notification_id.in_(notification_ids),
        )
        return set((await db.execute(stmt)).scalars().all())

    async def mark_read(
        self,
        db: AsyncSession,
        profile: Profile,
        notification_id: int,
    ) -> NotificationResponse:
        """Mark one notification read for the caller.

        Role-wide rows get a receipt for the caller only, so teammates keep
        their own unread state.

        Raises:
            NotFoundError: If it does not exist or is not visible to the caller.
        """
        stmt = select(Notification).where(
            Notification.id == notification_id, _visible_to(profile)
        )
        notification = (await db.execute(stmt)).scalar_one_or_none()
        if notification is None:
            raise NotFoundError(message=f"Notification not found: {notification_id}")

        if notification.user_id is None:
            await db.execute(
                pg_insert(NotificationRead)
                .values(notification_id=notification.id, profile_id=profile.id)
                .on_conflict_do_nothing(constraint="uq_notification_read_recipient")
            )
        else:
            notification.is_read = True
            await db.flush()
        return _as_response(notification, True)

    async def mark_all_read(self, db: AsyncSession, profile: Profile) -> int:
        """Mark every notification still unread for the caller as read."""
        personal = await db.execute(
            update(Notification)
            .where(Notification.user_id == profile.id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        unread_for_role = select(Notification.id, literal(profile.id)).where(
            _for_role(profile), ~_has_receipt(profile)
        )
        receipts = await db.execute(
            pg_insert(NotificationRead)
            .from_select(["notification_id", "profile_id"], unread_for_role)
            .on_conflict_do_nothing(constraint="uq_notification_read_recipient")
        )
        updated = (personal.rowcount or 0) + (receipts.rowcount or 0)

        logger.info("notifications.marked_all_read", profile_id=profile.id, updated=updated)
        return updated

    async def unread_count(self, db: AsyncSession, profile: Profile) -> int:
        """Count unread notifications for the badge."""
        stmt = select(func.count(Notification.id)).where(
            _visible_to(profile), ~_read_by(profile)
        )
        return (await db.execute(stmt)).scalar_one()
