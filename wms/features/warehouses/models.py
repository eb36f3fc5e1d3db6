"""Warehouse and location ORM models."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wms.core.database import Base
from wms.shared.models import TimestampMixin


def location_display_name(floor: int, zone: str) -> str:
    """Human-readable location label printed on pick lists and scans."""
    return f"Floor {floor} - Zone {zone}"


class Warehouse(TimestampMixin, Base):
    """Physical warehouse site."""

    __tablename__ = "warehouse"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    locations: Mapped[list["WarehouseLocation"]] = relationship(
        back_populates="warehouse",
        cascade="all, delete-orphan",
        order_by="(WarehouseLocation.floor, WarehouseLocation.zone)",
    )


class WarehouseLocation(TimestampMixin, Base):
    """Storage slot inside a warehouse, addressed by floor and zone."""

    __tablename__ = "warehouse_location"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    warehouse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("warehouse.id", ondelete="CASCADE"), index=True
    )
    floor: Mapped[int] = mapped_column(Integer)
    zone: Mapped[str] = mapped_column(String(20))

    warehouse: Mapped[Warehouse] = relationship(back_populates="locations")

    __table_args__ = (
        UniqueConstraint("warehouse_id", "floor", "zone", name="uq_location_floor_zone"),
        CheckConstraint("floor >= 0", name="ck_location_floor_non_negative"),
    )

    @property
    def display_name(self) -> str:
        return location_display_name(self.floor, self.zone)
