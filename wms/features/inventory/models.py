"""Inventory ORM models: boxes on hand, the movement ledger and transfers.

One InventoryItem row exists per physical box. Every quantity change is
mirrored by an InventoryMovement so that the ledger sum per product and
location always equals the quantity on hand.
"""

from enum import Enum
from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from wms.core.database import Base
from wms.shared.models import CreatedAtMixin, TimestampMixin


class InventoryStatus(str, Enum):
    """Box status."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    DAMAGED = "damaged"
    IN_TRANSIT = "in_transit"


# Statuses that count toward sellable stock
IN_STOCK_STATUSES: tuple[str, ...] = (
    InventoryStatus.AVAILABLE.value,
    InventoryStatus.RESERVED.value,
)


class MovementType(str, Enum):
    """Ledger entry kind."""

    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"
    RESERVE = "reserve"
    RELEASE = "release"
    TRANSFER = "transfer"


class MovementStatus(str, Enum):
    """Ledger entry state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_TRANSIT = "in_transit"


class TransferStatus(str, Enum):
    """Transfer request lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


VALID_TRANSFER_TRANSITIONS: dict[TransferStatus, set[TransferStatus]] = {
    TransferStatus.PENDING: {TransferStatus.APPROVED, TransferStatus.REJECTED},
    TransferStatus.APPROVED: {TransferStatus.COMPLETED},
    TransferStatus.REJECTED: set(),
    TransferStatus.COMPLETED: set(),
}


class InventoryItem(TimestampMixin, Base):
    """A box on hand at a warehouse location."""

    __tablename__ = "inventory"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"), index=True)
    location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("warehouse_location.id"), index=True
    )
    batch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("processed_batch.id"), index=True, nullable=True
    )
    barcode: Mapped[str] = mapped_column(String(64), unique=True)
    quantity: Mapped[int] = mapped_column(Integer)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=InventoryStatus.AVAILABLE.value, index=True
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        CheckConstraint(
            "status IN ('available', 'reserved', 'sold', 'damaged', 'in_transit')",
            name="ck_inventory_valid_status",
        ),
    )


class InventoryMovement(CreatedAtMixin, Base):
    """Append-only ledger entry.

    ``quantity`` is signed: receipts are positive, deductions negative, scans
    zero.
    """

    __tablename__ = "inventory_movement"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"), index=True)
    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse_location.id"))
    inventory_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory.id", ondelete="SET NULL"), index=True, nullable=True
    )
    movement_type: Mapped[str] = mapped_column(String(20), index=True)
    quantity: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default=MovementStatus.APPROVED.value)
    reference_table: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    performed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), index=True, nullable=True
    )
    details: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict)

    __table_args__ = (
        Index("ix_movement_reference", "reference_table", "reference_id"),
        CheckConstraint(
            "movement_type IN ('in', 'out', 'adjustment', 'reserve', 'release', 'transfer')",
            name="ck_movement_valid_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'in_transit')",
            name="ck_movement_valid_status",
        ),
    )


class InventoryTransfer(TimestampMixin, Base):
    """Request to move boxes between locations or warehouses."""

    __tablename__ = "inventory_transfer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"), index=True)
    source_warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"))
    source_location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("warehouse_location.id")
    )
    destination_warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse.id"))
    destination_location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("warehouse_location.id")
    )
    quantity: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(
        String(20), default=TransferStatus.PENDING.value, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    initiated_by: Mapped[int] = mapped_column(Integer, ForeignKey("profile.id"))
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )
    barcodes: Mapped[list[str]] = mapped_column(JSONB, default=list)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_transfer_quantity_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed')",
            name="ck_transfer_valid_status",
        ),
    )
