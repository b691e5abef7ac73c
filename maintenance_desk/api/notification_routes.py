"""
Notification feed routes
"""
from fastapi import APIRouter, Depends, status
from typing import Any, Dict
import logging

from maintenance_desk.api.deps import get_context
from maintenance_desk.context import MaintenanceContext
from maintenance_desk.middleware.auth import get_current_actor
from maintenance_desk.models import Actor, NotificationCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _feed(ctx: MaintenanceContext) -> Dict[str, Any]:
    return {
        "unread_count": ctx.notifications.unread_count,
        "notifications": [n.model_dump(mode="json") for n in ctx.notifications.notifications],
    }


@router.get("", response_model=Dict[str, Any])
async def list_notifications(
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    return _feed(ctx)


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_notification(
    request: NotificationCreate,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    notification = ctx.notifications.add(request)
    return {"success": True, "notification": notification.model_dump(mode="json")}


@router.post("/read-all", response_model=Dict[str, Any])
async def mark_all_as_read(
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ctx.notifications.mark_all_as_read()
    return _feed(ctx)


@router.post("/{notification_id}/read", response_model=Dict[str, Any])
async def mark_as_read(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    notification = ctx.notifications.mark_as_read(notification_id)
    return {
        "notification": notification.model_dump(mode="json"),
        "unread_count": ctx.notifications.unread_count,
    }


@router.delete("", response_model=Dict[str, Any])
async def clear_notifications(
    actor: Actor = Depends(get_current_actor),
    ctx: MaintenanceContext = Depends(get_context),
) -> Dict[str, Any]:
    ctx.notifications.clear()
    return {"success": True, "unread_count": 0}
