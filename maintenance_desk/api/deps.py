"""
Shared route dependencies
"""
from fastapi import Request

from maintenance_desk.context import MaintenanceContext
from maintenance_desk.models import Actor
from maintenance_desk.security import permissions


def get_context(request: Request) -> MaintenanceContext:
    """The context built by the application lifespan."""
    return request.app.state.context


def require(ctx: MaintenanceContext, actor: Actor, action: str, **kwargs) -> None:
    """Read-side role check; honours the store's ``enforce_authorization`` switch."""
    if ctx.tickets.enforce_authorization:
        permissions.authorize(actor, action, **kwargs)
