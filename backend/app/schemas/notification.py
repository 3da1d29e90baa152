"""Pydantic schemas for the notification feed and role broadcast."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.enums import NotificationType, Role


class NotificationOut(BaseModel):
    noti_id: int
    user_id: int
    noti_type: NotificationType
    target_role: Optional[Role] = None
    title: str
    message: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UnreadCountOut(BaseModel):
    unread: int


class RoleBroadcastRequest(BaseModel):
    role: Role
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    noti_type: NotificationType = NotificationType.SYSTEM_ANNOUNCEMENT


class RoleBroadcastResult(BaseModel):
    role: Role
    count: int
