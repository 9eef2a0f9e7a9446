from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.models.notification import NotificationType


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: UUID
    remark_id: UUID | None = None
    type: NotificationType
    title: str
    message: str
    is_read: bool
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    unread_count: int
    notifications: list[NotificationRead]


class NotificationUnreadCountResponse(BaseModel):
    unread_count: int
