# /app/models/notification_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    body: str
    link: Optional[str] = None
    is_read: bool = False
    type: NotificationType = NotificationType.INFO
    created_at: datetime


class NotificationCreate(BaseModel):
    """Payload a teacher or admin uses to notify one user of their tenant."""
    user_id: str
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    link: Optional[str] = None
    type: NotificationType = NotificationType.INFO


class NotificationFeed(BaseModel):
    """The newest notifications of one user together with their unread count."""
    notifications: List[Notification] = Field(default_factory=list)
    unreadCount: int = Field(default=0, ge=0)


class MarkAllReadResponse(BaseModel):
    updated: int = Field(..., description="How many notifications changed from unread to read.")
    unreadCount: int = 0
