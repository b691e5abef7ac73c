"""
Pydantic models for data validation
"""
from .ticket import (
    as_utc,
    Ticket,
    TicketCreate,
    TicketUpdate,
    TicketStatus,
    TicketPriority,
    TicketCategory,
    TicketNote,
    NoteCreate,
    Feedback,
)
from .staff import Staff
from .notification import Notification, NotificationCreate, NotificationType
from .audit_log import AuditLog, AuditOperation
from .user import Actor, UserRole

__all__ = [
    "as_utc",
    "Ticket",
    "TicketCreate",
    "TicketUpdate",
    "TicketStatus",
    "TicketPriority",
    "TicketCategory",
    "TicketNote",
    "NoteCreate",
    "Feedback",
    "Staff",
    "Notification",
    "NotificationCreate",
    "NotificationType",
    "AuditLog",
    "AuditOperation",
    "Actor",
    "UserRole",
]
