"""
Audit log models
"""
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum


class AuditOperation(str, Enum):
    """Audit operation types"""
    CREATE_TICKET = "CREATE_TICKET"
    ASSIGN_TICKET = "ASSIGN_TICKET"
    UPDATE_STATUS = "UPDATE_STATUS"
    ADD_NOTE = "ADD_NOTE"
    ADD_FEEDBACK = "ADD_FEEDBACK"
    UPDATE_TICKET = "UPDATE_TICKET"
    DELETE_TICKET = "DELETE_TICKET"


class AuditLog(BaseModel):
    """One recorded ticket mutation"""
    id: str
    ticket_id: str
    actor_id: Optional[str] = None
    operation: AuditOperation
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    timestamp: datetime

    class Config:
        frozen = True
