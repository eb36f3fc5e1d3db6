"""Pydantic schemas for notifications."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wms.features.notifications.models import NotificationAction


class NotificationResponse(BaseModel):
    """Notification as shown in the inbox."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    user_id: int | None = None
    role: str | None = None
    action_type: NotificationAction
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="meta")
    is_read: bool
    created_at: datetime


class UnreadCountResponse(BaseModel):
    """Unread badge counter."""

    unread: int = Field(..., ge=0)


class MarkAllReadResponse(BaseModel):
    """Result of marking the inbox read."""

    updated: int = Field(..., ge=0)
