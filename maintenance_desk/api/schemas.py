"""
Request bodies accepted by the HTTP adapter
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Tuple


class TicketCreateRequest(BaseModel):
    title: str
    description: str
    category: str
    priority: str = "medium"
    property_id: str
    unit_number: Optional[str] = None
    images: Tuple[str, ...] = ()
    created_by: Optional[str] = Field(None, description="Defaults to the acting user")


class AssignRequest(BaseModel):
    staff_id: str
    scheduled_date: datetime


class StatusChangeRequest(BaseModel):
    status: str


class NoteRequest(BaseModel):
    text: str
    is_private: bool = False


class FeedbackRequest(BaseModel):
    rating: int = Field(..., strict=True)
    comment: Optional[str] = None
