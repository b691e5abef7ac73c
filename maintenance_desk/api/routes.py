"""
FastAPI routes for the ticket lifecycle
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, Optional
import logging

from maintenance_desk.api.deps import get_context, require
from maintenance_desk.api.schemas import (
    AssignRequest,
    FeedbackRequest,
    NoteRequest,
    StatusChangeRequest,
    TicketCreateRequest,
)
from maintenance_desk.context import MaintenanceContext
from maintenance_desk.middleware.auth import get_current_actor
from maintenance_desk.models import (
    Actor,
    Ticket,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)
from maintenance_desk.projections import queries
from maintenance_desk.security import permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tickets"])


def _render(ticket: Ticket, actor: Actor) -> Dict[str, Any]:
    return queries.redact_for(ticket, actor).model_dump(mode="json")


def _visible_ticket(ctx: MaintenanceContext, ticket_id: str, actor: Actor) -> Ticket:
    ticket = ctx.tickets.get_ticket(ticket_id)
    require(ctx, actor, permissions.ACTION_VIEW, ticket=ticket)
    return ticket


@router.post("/tickets", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_ticket(
    request: TicketCreateRequest,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """
    Open a new maintenance request

    The requester defaults to the acting user.
    """
    data = request.model_dump()
    data["created_by"] = data["created_by"] or actor.id

    ticket = ctx.tickets.create(data, actor=actor)
    return {
        "success": True,
        "ticket_id": ticket.id,
        "message": "Ticket created successfully",
        "ticket": _render(ticket, actor),
    }


@router.get("/tickets", response_model=Dict[str, Any])
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    priority: Optional[TicketPriority] = Query(None),
    category: Optional[TicketCategory] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None),
    property_id: Optional[str] = Query(None),
    assigned_to: Optional[str] = Query(None),
    created_by: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """
    List tickets with optional filters

    Tenants only ever see their own tickets.
    """
    tickets = list(ctx.tickets.tickets)

    if actor.is_tenant:
        tickets = queries.get_tickets_by_user(tickets, actor.id)
    elif created_by:
        tickets = queries.get_tickets_by_user(tickets, created_by)
    if property_id:
        tickets = queries.get_tickets_by_property(tickets, property_id)
    if assigned_to:
        tickets = queries.get_tickets_by_assignee(tickets, assigned_to)

    tickets = queries.filter_tickets(
        tickets,
        search=search,
        status=status_filter,
        priority=priority,
        category=category,
        sort_by=sort_by,
    )
    return {
        "count": len(tickets),
        "tickets": [_render(ticket, actor) for ticket in tickets],
    }


@router.get("/tickets/{ticket_id}", response_model=Dict[str, Any])
async def get_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ticket = _visible_ticket(ctx, ticket_id, actor)
    return _render(ticket, actor)


@router.patch("/tickets/{ticket_id}", response_model=Dict[str, Any])
async def update_ticket(
    ticket_id: str,
    payload: Dict[str, Any],
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """Merge editable fields; lifecycle fields have their own endpoints."""
    ticket = ctx.tickets.update(ticket_id, payload, actor=actor)
    return _render(ticket, actor)


@router.delete("/tickets/{ticket_id}", response_model=Dict[str, Any])
async def delete_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ctx.tickets.delete(ticket_id, actor=actor)
    return {"success": True, "ticket_id": ticket_id}


@router.post("/tickets/{ticket_id}/assign", response_model=Dict[str, Any])
async def assign_ticket(
    ticket_id: str,
    request: AssignRequest,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """Assign to an eligible staff member for a future visit date"""
    ticket = ctx.assignments.assign(ticket_id, request.staff_id, request.scheduled_date, actor=actor)
    return _render(ticket, actor)


@router.post("/tickets/{ticket_id}/status", response_model=Dict[str, Any])
async def change_status(
    ticket_id: str,
    request: StatusChangeRequest,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ticket = ctx.tickets.change_status(ticket_id, request.status, actor=actor)
    return _render(ticket, actor)


@router.post("/tickets/{ticket_id}/notes", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_note(
    ticket_id: str,
    request: NoteRequest,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    note = {"created_by": actor.id, "text": request.text, "is_private": request.is_private}
    ticket = ctx.tickets.add_note(ticket_id, note, actor=actor)
    return _render(ticket, actor)


@router.post("/tickets/{ticket_id}/feedback", response_model=Dict[str, Any])
async def add_feedback(
    ticket_id: str,
    request: FeedbackRequest,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ticket = ctx.tickets.add_feedback(ticket_id, request.rating, request.comment, actor=actor)
    return _render(ticket, actor)


@router.get("/tickets/{ticket_id}/audit", response_model=Dict[str, Any])
async def get_ticket_audit(
    ticket_id: str,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """Mutation history; available to staff and managers, also after deletion"""
    require(ctx, actor, permissions.ACTION_VIEW_AUDIT)
    entries = ctx.tickets.audit_trail(ticket_id)
    return {
        "ticket_id": ticket_id,
        "count": len(entries),
        "entries": [entry.model_dump(mode="json") for entry in entries],
    }
