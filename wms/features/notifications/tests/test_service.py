"""Unit tests for the notification service."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from wms.core.exceptions import NotFoundError
from wms.features.notifications.models import Notification, NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Role
from wms.shared import PaginationParams

STAMP = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


async def test_notify_user_queues_unread_row(mock_db):
    notification = await NotificationService().notify_user(
        mock_db,
        7,
        NotificationAction.STOCK_OUT_APPROVED,
        title="Stock-out approved",
        message="Stock-out #1 approved for 30 unit(s)",
        metadata={"stock_out_id": 1},
    )

    mock_db.add.assert_called_once_with(notification)
    mock_db.flush.assert_awaited_once()
    assert notification.user_id == 7
    assert notification.role is None
    assert notification.is_read is False
    assert notification.meta == {"stock_out_id": 1}


async def test_notify_role_has_no_user(mock_db):
    notification = await NotificationService().notify_role(
        mock_db,
        Role.WAREHOUSE_MANAGER,
        NotificationAction.STOCK_IN_SUBMITTED,
        title="New stock-in",
        message="4 boxes submitted",
    )

    assert notification.user_id is None
    assert notification.role == "warehouse_manager"
    assert notification.action_type == "stock_in_submitted"
    assert notification.meta == {}


def _notification(notification_id: int, user_id: int | None = None, **overrides) -> Notification:
    fields = {
        "id": notification_id,
        "user_id": user_id,
        "role": None if user_id else "sales_operator",
        "action_type": "order_created",
        "title": "Sales order created",
        "message": "Order SO-20260301-0001 for Acme",
        "meta": {"sales_order_id": 1},
        "is_read": False,
        "created_at": STAMP,
    }
    fields.update(overrides)
    return Notification(**fields)


class TestMarkRead:
    async def test_not_visible(self, mock_db, make_result, profile_factory) -> None:
        mock_db.execute.return_value = make_result(None)

        with pytest.raises(NotFoundError):
            await NotificationService().mark_read(mock_db, profile_factory(Role.CUSTOMER, 30), 9)

    async def test_role_notification_gets_receipt_for_caller_only(
        self, mock_db, make_result, profile_factory
    ) -> None:
        row = _notification(9, meta={"sales_order_id": 42})
        mock_db.execute.side_effect = [make_result(row), MagicMock()]

        result = await NotificationService().mark_read(
            mock_db, profile_factory(Role.SALES_OPERATOR, 5), 9
        )

        assert result.is_read is True
        assert result.metadata == {"sales_order_id": 42}
        assert row.is_read is False
        receipt_sql = str(mock_db.execute.call_args_list[1].args[0])
        assert "INSERT INTO notification_read" in receipt_sql
        assert "ON CONFLICT" in receipt_sql

    async def test_personal_notification_sets_flag(
        self, mock_db, make_result, profile_factory
    ) -> None:
        row = _notification(10, user_id=5)
        mock_db.execute.return_value = make_result(row)

        result = await NotificationService().mark_read(
            mock_db, profile_factory(Role.SALES_OPERATOR, 5), 10
        )

        assert result.is_read is True
        assert row.is_read is True
        mock_db.execute.assert_awaited_once()


class TestMarkAllRead:
    async def test_counts_personal_rows_and_new_receipts(self, mock_db, profile_factory) -> None:
        mock_db.execute.side_effect = [MagicMock(rowcount=1), MagicMock(rowcount=3)]

        updated = await NotificationService().mark_all_read(
            mock_db, profile_factory(Role.SALES_OPERATOR, 5)
        )

        assert updated == 4

    async def test_role_rows_are_not_flagged_for_the_whole_team(
        self, mock_db, profile_factory
    ) -> None:
        mock_db.execute.side_effect = [MagicMock(rowcount=0), MagicMock(rowcount=2)]

        await NotificationService().mark_all_read(mock_db, profile_factory(Role.SALES_OPERATOR, 5))

        personal_sql, receipt_sql = (str(c.args[0]) for c in mock_db.execute.call_args_list)
        assert personal_sql.startswith("UPDATE notification")
        assert "notification.user_id = " in personal_sql
        assert "notification.role" not in personal_sql
        assert receipt_sql.startswith("INSERT INTO notification_read")


async def test_listing_reports_read_state_per_caller(mock_db, make_result, profile_factory):
    read_by_caller = _notification(1)
    read_by_teammate_only = _notification(2)
    personal = _notification(3, user_id=5, role=None, is_read=True)
    mock_db.execute.side_effect = [
        make_result(3),
        make_result(scalars=[read_by_caller, read_by_teammate_only, personal]),
        make_result(scalars=[1]),
    ]

    page = await NotificationService().list_notifications(
        mock_db, profile_factory(Role.SALES_OPERATOR, 5), PaginationParams()
    )

    assert [(n.id, n.is_read) for n in page.items] == [(1, True), (2, False), (3, True)]
    receipt_sql = str(mock_db.execute.call_args_list[2].args[0])
    assert "notification_read.profile_id = " in receipt_sql


async def test_unread_count(mock_db, make_result, profile_factory):
    mock_db.execute.return_value = make_result(3)

    assert await NotificationService().unread_count(mock_db, profile_factory()) == 3
    count_sql = str(mock_db.execute.call_args.args[0])
    assert "notification_read" in count_sql
