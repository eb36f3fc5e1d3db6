"""Customer inquiry ORM models and status machine."""

from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wms.core.database import Base
from wms.shared.models import TimestampMixin


class InquiryStatus(str, Enum):
    """Inquiry lifecycle."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESPONDED = "responded"
    CONVERTED = "converted"
    COMPLETED = "completed"
    CLOSED = "closed"


VALID_INQUIRY_TRANSITIONS: dict[InquiryStatus, set[InquiryStatus]] = {
    InquiryStatus.NEW: {
        InquiryStatus.IN_PROGRESS,
        InquiryStatus.RESPONDED,
        InquiryStatus.CONVERTED,
        InquiryStatus.CLOSED,
    },
    InquiryStatus.IN_PROGRESS: {
        InquiryStatus.RESPONDED,
        InquiryStatus.CONVERTED,
        InquiryStatus.CLOSED,
    },
    InquiryStatus.RESPONDED: {
        InquiryStatus.IN_PROGRESS,
        InquiryStatus.CONVERTED,
        InquiryStatus.CLOSED,
    },
    InquiryStatus.CONVERTED: {InquiryStatus.COMPLETED},
    InquiryStatus.COMPLETED: set(),
    InquiryStatus.CLOSED: set(),
}


class SalesInquiry(TimestampMixin, Base):
    """Inquiry submitted from the storefront or by a logged-in customer."""

    __tablename__ = "sales_inquiry"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(100))
    customer_email: Mapped[str] = mapped_column(String(255), index=True)
    customer_company: Mapped[str | None] = mapped_column(String(150), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=InquiryStatus.NEW.value, index=True)
    customer_profile_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id", ondelete="SET NULL"), index=True, nullable=True
    )
    responded_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profile.id"), nullable=True
    )

    items: Mapped[list["SalesInquiryItem"]] = relationship(
        back_populates="inquiry",
        cascade="all, delete-orphan",
        order_by="SalesInquiryItem.id",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'in_progress', 'responded', 'converted', 'completed', 'closed')",
            name="ck_inquiry_valid_status",
        ),
    )


class SalesInquiryItem(Base):
    """Product line of an inquiry."""

    __tablename__ = "sales_inquiry_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inquiry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sales_inquiry.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("product.id"))
    quantity: Mapped[int] = mapped_column(Integer)
    specific_requirements: Mapped[str | None] = mapped_column(Text, nullable=True)

    inquiry: Mapped[SalesInquiry] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_inquiry_item_quantity_positive"),
    )
