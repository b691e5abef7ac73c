"""
Ticket models
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum


class TicketStatus(str, Enum):
    """Ticket status values"""
    NEW = "new"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(str, Enum):
    """Ticket priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TicketCategory(str, Enum):
    """Maintenance domains, also used to match staff specialties"""
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HVAC = "hvac"
    APPLIANCE = "appliance"
    STRUCTURAL = "structural"
    PEST = "pest"
    OTHER = "other"


def _require_text(value: str) -> str:
    if value is None or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read naive datetimes as UTC so every stored timestamp is comparable."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class TicketNote(BaseModel):
    """Annotation appended to a ticket"""
    id: str
    ticket_id: str
    created_by: str
    created_at: datetime
    text: str
    is_private: bool = False

    class Config:
        frozen = True


class NoteCreate(BaseModel):
    """Model for appending a note to a ticket"""
    created_by: str
    text: str
    is_private: bool = False

    @field_validator("created_by", "text")
    @classmethod
    def validate_text(cls, v):
        return _require_text(v)


class Feedback(BaseModel):
    """Tenant rating left after the work is done"""
    rating: int = Field(..., ge=1, le=5, strict=True)
    comment: Optional[str] = None

    class Config:
        frozen = True


class TicketBase(BaseModel):
    """Fields supplied by the requester"""
    title: str
    description: str
    category: TicketCategory
    priority: TicketPriority = TicketPriority.MEDIUM
    created_by: str
    property_id: str
    unit_number: Optional[str] = None
    images: Tuple[str, ...] = ()

    @field_validator("title", "description", "created_by", "property_id")
    @classmethod
    def validate_required_text(cls, v):
        return _require_text(v)


class TicketCreate(TicketBase):
    """Model for creating a new ticket"""

    class Config:
        extra = "forbid"


class TicketUpdate(BaseModel):
    """
    Model for a generic field update.

    Lifecycle fields (status, assignee, schedule, completion, feedback, notes)
    are owned by their dedicated operations and cannot be merged here.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    property_id: Optional[str] = None
    unit_number: Optional[str] = None
    images: Optional[Tuple[str, ...]] = None
    cost: Optional[float] = Field(None, ge=0)

    class Config:
        extra = "forbid"

    @field_validator("title", "description", "property_id")
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return v
        return _require_text(v)


class Ticket(TicketBase):
    """Complete ticket snapshot"""
    id: str
    status: TicketStatus = TicketStatus.NEW
    created_at: datetime
    updated_at: datetime
    assigned_to: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    feedback: Optional[Feedback] = None
    notes: Tuple[TicketNote, ...] = ()
    cost: Optional[float] = Field(None, ge=0)

    class Config:
        frozen = True

    @field_validator("created_at", "updated_at", "scheduled_date", "completed_date")
    @classmethod
    def validate_timezone(cls, v):
        return as_utc(v)

    @property
    def is_completed(self) -> bool:
        return self.status in (TicketStatus.RESOLVED, TicketStatus.CLOSED)
