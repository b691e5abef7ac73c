"""
Role checks applied at the ticket store boundary.

UI-level hiding of controls is not a security boundary, so every mutating
store call that carries an actor passes through ``authorize``.
"""
import logging
from typing import Dict, FrozenSet, Optional

from maintenance_desk.models import Actor, Ticket, UserRole
from maintenance_desk.security.error_handler import AuthorizationError

logger = logging.getLogger(__name__)


ACTION_CREATE = "create tickets"
ACTION_ASSIGN = "assign tickets"
ACTION_CHANGE_STATUS = "change ticket status"
ACTION_ADD_NOTE = "add notes"
ACTION_ADD_FEEDBACK = "leave feedback"
ACTION_UPDATE = "update tickets"
ACTION_DELETE = "delete tickets"
ACTION_VIEW = "view tickets"
ACTION_VIEW_STATS = "view statistics"
ACTION_VIEW_AUDIT = "view the audit trail"

_ALL = frozenset(UserRole)
_STAFF_AND_MANAGER = frozenset({UserRole.STAFF, UserRole.MANAGER})

PERMISSIONS: Dict[str, FrozenSet[UserRole]] = {
    ACTION_CREATE: _ALL,
    ACTION_ASSIGN: frozenset({UserRole.MANAGER}),
    ACTION_CHANGE_STATUS: _STAFF_AND_MANAGER,
    ACTION_ADD_NOTE: _ALL,
    ACTION_ADD_FEEDBACK: frozenset({UserRole.TENANT, UserRole.MANAGER}),
    ACTION_UPDATE: _STAFF_AND_MANAGER,
    ACTION_DELETE: frozenset({UserRole.MANAGER}),
    ACTION_VIEW: _ALL,
    ACTION_VIEW_STATS: _STAFF_AND_MANAGER,
    ACTION_VIEW_AUDIT: _STAFF_AND_MANAGER,
}


def authorize(
    actor: Optional[Actor],
    action: str,
    ticket: Optional[Ticket] = None,
    created_by: Optional[str] = None,
    is_private: bool = False,
) -> None:
    """
    Raise AuthorizationError when ``actor`` may not perform ``action``.

    Calls without an actor are internal and always allowed. Tenants are further
    limited to their own tickets and may not write private notes.
    """
    if actor is None:
        return

    if actor.role not in PERMISSIONS[action]:
        logger.warning("Denied %s for %s (%s)", action, actor.id, actor.role.value)
        raise AuthorizationError(action, actor.role.value)

    if not actor.is_tenant:
        return

    owner = ticket.created_by if ticket is not None else created_by
    if owner is not None and owner != actor.id:
        logger.warning("Denied %s for tenant %s on ticket owned by %s", action, actor.id, owner)
        raise AuthorizationError(action, actor.role.value, "tenants may only act on their own tickets")

    if is_private:
        raise AuthorizationError(action, actor.role.value, "private notes are reserved for staff")
