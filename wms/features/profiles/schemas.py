"""Pydantic schemas for profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wms.features.profiles.models import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ProfileCreate(BaseModel):
    """Admin request to create a profile."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: str | None = Field(None, max_length=30)
    company: str | None = Field(None, max_length=150)
    role: Role = Role.FIELD_OPERATOR
    external_id: str | None = Field(None, max_length=64)


class CustomerRegistration(BaseModel):
    """Self-service customer registration."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    phone: str | None = Field(None, max_length=30)
    company: str | None = Field(None, max_length=150)
    external_id: str | None = Field(None, max_length=64)


class ProfileUpdate(BaseModel):
    """Partial profile update. Only admins may change email."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: str | None = Field(None, max_length=30)
    company: str | None = Field(None, max_length=150)


class RoleChange(BaseModel):
    """Request to change a profile's role."""

    role: Role


class ActiveChange(BaseModel):
    """Request to activate or deactivate a profile."""

    active: bool


class ProfileResponse(BaseModel):
    """Profile details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str | None = None
    username: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    role: Role
    active: bool
    created_at: datetime
    updated_at: datetime

