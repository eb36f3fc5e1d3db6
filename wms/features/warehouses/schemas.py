"""Pydantic schemas for warehouses and locations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WarehouseCreate(BaseModel):
    """Request body to create a warehouse."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    location: str | None = Field(None, max_length=255)


class WarehouseUpdate(BaseModel):
    """Partial warehouse update."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    location: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class LocationCreate(BaseModel):
    """Request body to add a floor/zone slot to a warehouse."""

    model_config = ConfigDict(extra="forbid")

    floor: int = Field(..., ge=0, le=200)
    zone: str = Field(..., min_length=1, max_length=20)

    @field_validator("zone")
    @classmethod
    def normalize_zone(cls, v: str) -> str:
        """Zones are case-insensitive labels (A, b1 ...) stored upper-case."""
        return v.strip().upper()


class LocationResponse(BaseModel):
    """Warehouse location."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    warehouse_id: int
    floor: int
    zone: str
    display_name: str
    created_at: datetime


class WarehouseResponse(BaseModel):
    """Warehouse with its locations."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str | None = None
    is_active: bool
    locations: list[LocationResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class LocationStock(BaseModel):
    """Stock held at one location."""

    location_id: int
    display_name: str
    box_count: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)


class WarehouseSummaryResponse(BaseModel):
    """Per-location stock totals of a warehouse."""

    warehouse_id: int
    warehouse_name: str
    total_boxes: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    locations: list[LocationStock]
