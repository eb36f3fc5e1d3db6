"""Processed batch and batch item ORM models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wms.core.database import Base
from wms.shared.models import TimestampMixin


class BatchStatus(str, Enum):
    """Batch processing state."""

    PROCESSING = "processing"
    COMPLETED = "completed"


class ProcessedBatch(TimestampMixin, Base):
    """Group of boxes received together from one stock-in at one location."""

    __tablename__ = "processed_batch"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    batch_number: Mapped[str] = mapped_column(String(50), unique=True)
    stock_in_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stock_in.id"), index=True
    )
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"), index=True)
    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse_location.id"))
    total_boxes: Mapped[int] = mapped_column(Integer)
    total_quantity: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default=BatchStatus.PROCESSING.value)
    processed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    items: Mapped[list["BatchItem"]] = relationship(
        back_populates="batch",
        cascade="all, delete-orphan",
        order_by="BatchItem.barcode",
    )

    __table_args__ = (
        CheckConstraint("total_boxes > 0", name="ck_batch_total_boxes_positive"),
        CheckConstraint("total_quantity >= 0", name="ck_batch_total_quantity_non_negative"),
        CheckConstraint(
            "status IN ('processing', 'completed')", name="ck_batch_valid_status"
        ),
    )


class BatchItem(TimestampMixin, Base):
    """One physical box of a batch, identified by its barcode."""

    __tablename__ = "batch_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    batch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("processed_batch.id", ondelete="CASCADE"), index=True
    )
    barcode: Mapped[str] = mapped_column(String(64), unique=True)
    quantity: Mapped[int] = mapped_column(Integer)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"))
    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse_location.id"))
    status: Mapped[str] = mapped_column(String(20), default="available")

    batch: Mapped[ProcessedBatch] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_batch_item_quantity_non_negative"),
    )
