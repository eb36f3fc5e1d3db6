"""Unit tests for the stock-in workflow service."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from wms.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from wms.features.catalog.models import Product
from wms.features.notifications.models import NotificationAction
from wms.features.profiles.models import Role
from wms.features.stock_in.models import StockInStatus
from wms.features.stock_in.schemas import StockInCreate, StockInProcessRequest
from wms.features.stock_in.service import PlannedBatch, PlannedBox

PROCESS_REQUEST = StockInProcessRequest(
    batches=[{"warehouse_id": 1, "location_id": 2, "box_count": 2, "quantity_per_box": 6}]
)


class TestSubmit:
    async def test_inactive_product_rejected(self, service, mock_db, profile_factory) -> None:
        service.catalog.get_product_model.return_value = Product(
            id=3, name="Old Shirt", is_active=False
        )

        with pytest.raises(ValidationError):
            await service.submit_stock_in(
                mock_db,
                StockInCreate(product_id=3, boxes=2),
                profile_factory(Role.FIELD_OPERATOR, 20),
            )
        mock_db.add.assert_not_called()

    async def test_submission_notifies_managers(
        self, service, mock_db, profile_factory, stock_in_factory
    ) -> None:
        service.catalog.get_product_model.return_value = Product(
            id=3, name="Shirt", is_active=True
        )
        stamped = stock_in_factory()

        async def refresh(row) -> None:
            row.id = 1
            row.created_at = stamped.created_at
            row.updated_at = stamped.updated_at

        mock_db.refresh.side_effect = refresh

        result = await service.submit_stock_in(
            mock_db,
            StockInCreate(product_id=3, boxes=4, source="Mill"),
            profile_factory(Role.FIELD_OPERATOR, 20),
        )

        assert result.status is StockInStatus.PENDING
        assert result.submitted_by == 20
        args = service.notifications.notify_role.call_args.args
        assert args[1] is Role.WAREHOUSE_MANAGER
        assert args[2] is NotificationAction.STOCK_IN_SUBMITTED


class TestDecisions:
    async def test_approve_pending(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory())

        result = await service.approve_stock_in(
            mock_db, 1, profile_factory(Role.WAREHOUSE_MANAGER, 5)
        )

        assert result.status is StockInStatus.APPROVED
        assert result.processed_by == 5
        service.notifications.notify_user.assert_awaited_once()

    async def test_cannot_approve_rejected(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory(status=StockInStatus.REJECTED))

        with pytest.raises(InvalidTransitionError) as exc_info:
            await service.approve_stock_in(mock_db, 1, profile_factory(Role.WAREHOUSE_MANAGER))

        assert exc_info.value.details["current_status"] == "rejected"

    async def test_reject_records_reason(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory())

        result = await service.reject_stock_in(
            mock_db, 1, "Damaged cartons", profile_factory(Role.WAREHOUSE_MANAGER, 5)
        )

        assert result.status is StockInStatus.REJECTED
        assert result.rejection_reason == "Damaged cartons"

    async def test_field_operator_cannot_see_others_request(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory(submitted_by=20))

        with pytest.raises(NotFoundError):
            await service.get_stock_in(mock_db, 1, profile_factory(Role.FIELD_OPERATOR, 21))


class TestProcessing:
    async def test_pending_request_cannot_be_processed(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory())

        with pytest.raises(InvalidTransitionError):
            await service.process_stock_in(
                mock_db, 1, PROCESS_REQUEST, profile_factory(Role.WAREHOUSE_MANAGER)
            )

    async def test_failure_rolls_back_and_marks_failed(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(
            stock_in_factory(status=StockInStatus.APPROVED)
        )
        service._process = AsyncMock(side_effect=ConflictError(message="Barcodes taken"))
        service._mark_failed = AsyncMock()

        with pytest.raises(ConflictError):
            await service.process_stock_in(
                mock_db, 1, PROCESS_REQUEST, profile_factory(Role.WAREHOUSE_MANAGER)
            )

        mock_db.rollback.assert_awaited_once()
        service._mark_failed.assert_awaited_once_with(1, 20, "Barcodes taken")
        service.notifications.notify_user.assert_not_awaited()

    async def test_failed_request_can_be_retried(
        self, service, mock_db, make_result, profile_factory, stock_in_factory
    ) -> None:
        mock_db.execute.return_value = make_result(stock_in_factory(status=StockInStatus.FAILED))
        service._process = AsyncMock(
            return_value=MagicMock(total_boxes=2, total_quantity=12)
        )

        await service.process_stock_in(
            mock_db, 1, PROCESS_REQUEST, profile_factory(Role.WAREHOUSE_MANAGER)
        )

        service._process.assert_awaited_once()
        args = service.notifications.notify_user.call_args.args
        assert args[1:3] == (20, NotificationAction.STOCK_IN_COMPLETED)


class TestPlanValidation:
    def plan(self, *barcodes: str, quantity: int = 5) -> PlannedBatch:
        return PlannedBatch(
            sequence=1,
            warehouse_id=1,
            location_id=2,
            boxes=[PlannedBox(barcode=code, quantity=quantity) for code in barcodes],
        )

    async def test_repeated_barcodes_conflict(self, service, mock_db) -> None:
        with pytest.raises(ConflictError) as exc_info:
            await service._validate_plans(mock_db, [self.plan("A1", "A2"), self.plan("A2")])

        assert exc_info.value.details == {"barcodes": ["A2"]}

    async def test_existing_barcodes_conflict(self, service, mock_db) -> None:
        with patch(
            "wms.features.stock_in.service.existing_barcodes",
            AsyncMock(return_value=["A1"]),
        ):
            with pytest.raises(ConflictError, match="already exist"):
                await service._validate_plans(mock_db, [self.plan("A1", "A2")])

    async def test_box_limit(self, service, mock_db) -> None:
        service.settings = service.settings.model_copy(
            update={"stock_in_max_boxes_per_batch": 1}
        )

        with pytest.raises(ValidationError, match="exceeds the limit"):
            await service._validate_plans(mock_db, [self.plan("A1", "A2")])

    async def test_location_checked_against_warehouse(self, service, mock_db) -> None:
        service.warehouses.get_location.side_effect = ValidationError(message="wrong warehouse")

        with pytest.raises(ValidationError, match="wrong warehouse"):
            await service._validate_plans(mock_db, [self.plan("A1")])
