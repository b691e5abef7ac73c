"""
In-memory stores for tickets, notifications and staff
"""
from .ticket_store import TicketStore, utc_now
from .notification_store import NotificationStore
from .staff_directory import StaffDirectory

__all__ = [
    "TicketStore",
    "NotificationStore",
    "StaffDirectory",
    "utc_now",
]
