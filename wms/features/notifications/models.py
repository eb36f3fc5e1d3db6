"""Notification ORM models."""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from wms.core.database import Base
from wms.shared.models import CreatedAtMixin


class NotificationAction(str, Enum):
    """What happened, so clients can route the user to the right screen."""

    STOCK_IN_SUBMITTED = "stock_in_submitted"
    STOCK_IN_APPROVED = "stock_in_approved"
    STOCK_IN_REJECTED = "stock_in_rejected"
    STOCK_IN_COMPLETED = "stock_in_completed"
    STOCK_IN_FAILED = "stock_in_failed"
    STOCK_OUT_REQUESTED = "stock_out_requested"
    STOCK_OUT_APPROVED = "stock_out_approved"
    STOCK_OUT_REJECTED = "stock_out_rejected"
    STOCK_OUT_COMPLETED = "stock_out_completed"
    TRANSFER_REQUESTED = "transfer_requested"
    TRANSFER_APPROVED = "transfer_approved"
    TRANSFER_REJECTED = "transfer_rejected"
    INQUIRY_SUBMITTED = "inquiry_submitted"
    INQUIRY_RESPONDED = "inquiry_responded"
    ORDER_CREATED = "order_created"
    ORDER_STATUS_CHANGED = "order_status_changed"


class Notification(CreatedAtMixin, Base):
    """In-app notification addressed to one profile or to a whole role.

    Exactly one of user_id / role is expected to be set. ``is_read`` only
    tracks personal rows; each recipient of a role-wide row gets its own
    NotificationRead receipt.
    """

    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id", ondelete="CASCADE"), nullable=True
    )
    role: Mapped[str | None] = mapped_column(String(30), nullable=True)
    action_type: Mapped[str] = mapped_column(String(50), index=True)
    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    meta: Mapped[dict[str, Any]] = mapped_column("metadata", JSONB, default=dict)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)

    __table_args__ = (
        Index("ix_notification_user_unread", "user_id", "is_read"),
        Index("ix_notification_role_unread", "role", "is_read"),
    )


class NotificationRead(Base):
    """Read receipt of one profile for a role-wide notification."""

    __tablename__ = "notification_read"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    notification_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("notification.id", ondelete="CASCADE")
    )
    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profile.id", ondelete="CASCADE"), index=True
    )
    read_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("notification_id", "profile_id", name="uq_notification_read_recipient"),
    )
