"""
Ticket lifecycle rules: the status graph and the side effects of entering a status.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional

from maintenance_desk.models import Ticket, TicketStatus, as_utc
from maintenance_desk.security.error_handler import InvalidTransitionError

logger = logging.getLogger(__name__)


COMPLETED_STATUSES: FrozenSet[TicketStatus] = frozenset({TicketStatus.RESOLVED, TicketStatus.CLOSED})
ASSIGNED_STATUSES: FrozenSet[TicketStatus] = frozenset(set(TicketStatus) - {TicketStatus.NEW})
OPEN_STATUSES: FrozenSet[TicketStatus] = frozenset(set(TicketStatus) - COMPLETED_STATUSES)

# Forward graph: new -> assigned -> in-progress <-> on-hold -> resolved -> closed
TRANSITIONS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.NEW: frozenset({TicketStatus.ASSIGNED}),
    TicketStatus.ASSIGNED: frozenset({TicketStatus.IN_PROGRESS}),
    TicketStatus.IN_PROGRESS: frozenset({TicketStatus.ON_HOLD, TicketStatus.RESOLVED}),
    TicketStatus.ON_HOLD: frozenset({TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED}),
    TicketStatus.RESOLVED: frozenset({TicketStatus.CLOSED}),
    TicketStatus.CLOSED: frozenset(),
}

# Display order used when sorting by status
STATUS_ORDER: Dict[TicketStatus, int] = {status: index for index, status in enumerate(TicketStatus)}


def can_transition(current: TicketStatus, requested: TicketStatus) -> bool:
    """True when ``requested`` is a legal next status in the forward graph."""
    return requested in TRANSITIONS[current]


def is_terminal(status: TicketStatus) -> bool:
    return not TRANSITIONS[status]


def ensure_transition(ticket: Ticket, requested: TicketStatus, strict: bool) -> None:
    """
    Reject an illegal status change when running the strict lifecycle.

    The default lifecycle is permissive: managers may re-open or re-order work,
    so only the strict variant consults the graph.
    """
    if not strict or ticket.status == requested:
        return
    if not can_transition(ticket.status, requested):
        logger.warning(
            "Rejected transition %s -> %s for ticket %s",
            ticket.status.value, requested.value, ticket.id,
        )
        raise InvalidTransitionError(ticket.status.value, requested.value)


def ensure_assignable(ticket: Ticket, strict: bool) -> None:
    """Under the strict lifecycle, completed work cannot be re-assigned."""
    if strict and ticket.status in COMPLETED_STATUSES:
        logger.warning("Rejected assignment of completed ticket %s", ticket.id)
        raise InvalidTransitionError(ticket.status.value, TicketStatus.ASSIGNED.value)


def status_side_effects(ticket: Ticket, requested: TicketStatus, now: datetime) -> Dict[str, Any]:
    """
    Fields that must change together with the status.

    - entering resolved/closed stamps ``completed_date`` once; moving between
      the two completed statuses keeps the original stamp
    - leaving the completed statuses clears ``completed_date``
    - returning to ``new`` drops the assignment and its schedule
    """
    changes: Dict[str, Any] = {"status": requested}

    if requested in COMPLETED_STATUSES:
        if ticket.completed_date is None:
            changes["completed_date"] = now
    elif ticket.completed_date is not None:
        changes["completed_date"] = None

    if requested not in ASSIGNED_STATUSES and ticket.assigned_to is not None:
        changes["assigned_to"] = None
        changes["scheduled_date"] = None

    return changes


def assignment_changes(
    ticket: Ticket,
    staff_id: str,
    scheduled_date: Optional[datetime],
) -> Dict[str, Any]:
    """Fields written by an assignment, including re-opening completed tickets."""
    changes: Dict[str, Any] = {
        "assigned_to": staff_id,
        "scheduled_date": as_utc(scheduled_date),
        "status": TicketStatus.ASSIGNED,
    }
    if ticket.completed_date is not None:
        changes["completed_date"] = None
    return changes
