"""Profile ORM model.

A Profile is the application user record. It is distinct from the identity
held by the upstream authentication gateway, which is linked via
``external_id``.
"""

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wms.core.database import Base
from wms.shared.models import TimestampMixin


class Role(str, Enum):
    """Application roles, each with its own dashboard and permissions."""

    ADMIN = "admin"
    WAREHOUSE_MANAGER = "warehouse_manager"
    FIELD_OPERATOR = "field_operator"
    SALES_OPERATOR = "sales_operator"
    CUSTOMER = "customer"


STAFF_ROLES: frozenset[Role] = frozenset(
    {Role.ADMIN, Role.WAREHOUSE_MANAGER, Role.FIELD_OPERATOR, Role.SALES_OPERATOR}
)


class Profile(TimestampMixin, Base):
    """Application user.

    Attributes:
        id: Primary key (sent by clients as X-Profile-ID).
        external_id: Identity from the authentication gateway (unique, optional).
        username: Unique login/display handle.
        name: Full name.
        email: Contact email.
        phone: Contact phone.
        company: Company name (customers).
        role: One of Role.
        active: Inactive profiles cannot call the API.
    """

    __tablename__ = "profile"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    external_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    company: Mapped[str | None] = mapped_column(String(150), nullable=True)
    role: Mapped[str] = mapped_column(String(30), default=Role.CUSTOMER.value, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'warehouse_manager', 'field_operator', "
            "'sales_operator', 'customer')",
            name="ck_profile_valid_role",
        ),
    )

    @property
    def display_name(self) -> str:
        """Name if set, otherwise username."""
        return self.name or self.username
