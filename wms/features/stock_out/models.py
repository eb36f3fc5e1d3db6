"""Stock-out request ORM models and status machine."""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wms.core.database import Base
from wms.shared.models import TimestampMixin


class StockOutStatus(str, Enum):
    """Stock-out lifecycle (same vocabulary as stock-in)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSING = "processing"
    COMPLETED = "completed"


VALID_STOCK_OUT_TRANSITIONS: dict[StockOutStatus, set[StockOutStatus]] = {
    StockOutStatus.PENDING: {StockOutStatus.APPROVED, StockOutStatus.REJECTED},
    StockOutStatus.APPROVED: {StockOutStatus.PROCESSING, StockOutStatus.COMPLETED},
    StockOutStatus.PROCESSING: {StockOutStatus.COMPLETED},
    StockOutStatus.REJECTED: set(),
    StockOutStatus.COMPLETED: set(),
}


class StockOut(TimestampMixin, Base):
    """Request to remove a quantity of a product for a destination."""

    __tablename__ = "stock_out"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    quantity: Mapped[int] = mapped_column(Integer)
    destination: Mapped[str] = mapped_column(String(200))
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=StockOutStatus.PENDING.value, index=True
    )
    requested_by: Mapped[int] = mapped_column(Integer, ForeignKey("profile.id"), index=True)
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )
    approved_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    invoice_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    packing_slip_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_number: Mapped[str | None] = mapped_column(String(50), index=True, nullable=True)
    sales_order_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sales_order.id"), index=True, nullable=True
    )

    details: Mapped[list["StockOutDetail"]] = relationship(
        back_populates="stock_out",
        cascade="all, delete-orphan",
        order_by="StockOutDetail.id",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_out_quantity_positive"),
        CheckConstraint(
            "approved_quantity IS NULL OR "
            "(approved_quantity > 0 AND approved_quantity <= quantity)",
            name="ck_stock_out_approved_quantity_range",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'processing', 'completed')",
            name="ck_stock_out_valid_status",
        ),
    )

    @property
    def required_quantity(self) -> int:
        """Quantity that processing must deduct."""
        return self.approved_quantity or self.quantity


class StockOutDetail(TimestampMixin, Base):
    """One box deduction performed while processing a stock-out."""

    __tablename__ = "stock_out_detail"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    stock_out_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stock_out.id", ondelete="CASCADE"), index=True
    )
    inventory_id: Mapped[int] = mapped_column(Integer, ForeignKey("inventory.id"))
    barcode: Mapped[str] = mapped_column(String(64), index=True)
    quantity: Mapped[int] = mapped_column(Integer)
    processed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )

    stock_out: Mapped[StockOut] = relationship(back_populates="details")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_out_detail_quantity_positive"),
    )
