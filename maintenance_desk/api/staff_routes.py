"""
Staff roster and per-member workload
"""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, Optional
import logging

from maintenance_desk.api.deps import get_context, require
from maintenance_desk.context import MaintenanceContext
from maintenance_desk.middleware.auth import get_current_actor
from maintenance_desk.models import Actor, TicketCategory
from maintenance_desk.projections import stats
from maintenance_desk.security import permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/staff", tags=["staff"])


@router.get("", response_model=Dict[str, Any])
async def list_staff(
    category: Optional[TicketCategory] = Query(None, description="Only available members handling this category"),
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    """
    Roster listing

    With a category, only members eligible for assignment in it are returned.
    """
    members = ctx.assignments.eligible_staff(category) if category else list(ctx.staff)
    return {
        "count": len(members),
        "staff": [member.model_dump(mode="json") for member in members],
    }


@router.get("/{staff_id}/metrics", response_model=Dict[str, Any])
async def get_staff_metrics(
    staff_id: str,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    require(ctx, actor, permissions.ACTION_VIEW_STATS)
    member = ctx.staff.get(staff_id)
    tickets = ctx.tickets.tickets
    return {
        "staff": member.model_dump(mode="json"),
        "metrics": stats.staff_metrics(tickets, member.id).model_dump(),
        "summary": stats.staff_summary(tickets, member.id).model_dump(),
    }
