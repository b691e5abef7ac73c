"""
Statistics and role dashboards
"""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, Optional
import logging

from maintenance_desk.api.deps import get_context, require
from maintenance_desk.context import MaintenanceContext
from maintenance_desk.middleware.auth import get_current_actor
from maintenance_desk.models import Actor, UserRole
from maintenance_desk.projections import queries, stats
from maintenance_desk.security import permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/stats", response_model=Dict[str, Any])
async def get_statistics(
    property_id: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """Portfolio analytics, optionally narrowed to one property"""
    require(ctx, actor, permissions.ACTION_VIEW_STATS)
    summary = stats.summarize(ctx.tickets.tickets, property_id=property_id)
    return {"property_id": property_id, "statistics": summary.model_dump()}


@router.get("/dashboard", response_model=Dict[str, Any])
async def get_dashboard(
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """
    Role-specific overview

    Tenants see their own requests, staff see their assignments, managers see
    the portfolio statistics plus the most recently touched tickets.
    """
    tickets = ctx.tickets.tickets
    now = ctx.clock()

    if actor.role == UserRole.TENANT:
        own = queries.get_tickets_by_user(tickets, actor.id)
        return {
            "role": actor.role.value,
            "summary": stats.tenant_summary(tickets, actor.id).model_dump(),
            "upcoming": [
                queries.redact_for(ticket, actor).model_dump(mode="json")
                for ticket in queries.upcoming_scheduled(own, now)
            ],
        }

    if actor.role == UserRole.STAFF:
        assigned = queries.get_tickets_by_assignee(tickets, actor.id)
        return {
            "role": actor.role.value,
            "summary": stats.staff_summary(tickets, actor.id).model_dump(),
            "upcoming": [ticket.model_dump(mode="json") for ticket in queries.upcoming_scheduled(assigned, now)],
        }

    return {
        "role": actor.role.value,
        "statistics": stats.summarize(tickets).model_dump(),
        "urgent_open": len(queries.urgent_open_tickets(tickets)),
        "recent": [ticket.model_dump(mode="json") for ticket in queries.recently_updated(tickets)],
    }
