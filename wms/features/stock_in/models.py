"""Stock-in request ORM model and status machine."""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wms.core.database import Base
from wms.shared.models import TimestampMixin


class StockInStatus(str, Enum):
    """Stock-in lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


VALID_STOCK_IN_TRANSITIONS: dict[StockInStatus, set[StockInStatus]] = {
    StockInStatus.PENDING: {StockInStatus.APPROVED, StockInStatus.REJECTED},
    StockInStatus.APPROVED: {StockInStatus.PROCESSING},
    StockInStatus.PROCESSING: {StockInStatus.COMPLETED, StockInStatus.FAILED},
    StockInStatus.FAILED: {StockInStatus.PROCESSING},
    StockInStatus.REJECTED: set(),
    StockInStatus.COMPLETED: set(),
}


class StockIn(TimestampMixin, Base):
    """Request to receive boxes of a product into the warehouse.

    Attributes:
        boxes: Number of boxes announced by the submitter.
        source: Supplier / origin of the goods.
        submitted_by: Profile that filed the request.
        processed_by: Manager who approved, rejected or processed it.
        error_message: Reason of the last processing failure.
    """

    __tablename__ = "stock_in"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    boxes: Mapped[int] = mapped_column(Integer)
    source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=StockInStatus.PENDING.value, index=True
    )
    submitted_by: Mapped[int] = mapped_column(Integer, ForeignKey("profile.id"), index=True)
    processed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    processing_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    processing_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint("boxes > 0", name="ck_stock_in_boxes_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'processing', 'completed', 'failed')",
            name="ck_stock_in_valid_status",
        ),
    )
