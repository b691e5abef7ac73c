"""
Notification feed models
"""
from pydantic import BaseModel, field_validator
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Notification severity"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationCreate(BaseModel):
    """Model for pushing a new notification"""
    type: NotificationType = NotificationType.INFO
    title: str
    message: str

    class Config:
        extra = "forbid"

    @field_validator("title", "message")
    @classmethod
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class Notification(NotificationCreate):
    """Stored notification"""
    id: str
    read: bool = False
    created_at: datetime

    class Config:
        frozen = True
