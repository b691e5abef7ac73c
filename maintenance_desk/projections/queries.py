"""
Read-side filters over a ticket snapshot.

Every function takes the snapshot explicitly and returns a new list in
snapshot order unless a sort is requested.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from maintenance_desk.models import (
    Actor,
    Ticket,
    TicketCategory,
    TicketNote,
    TicketPriority,
    TicketStatus,
)
from maintenance_desk.security.error_handler import ValidationError
from maintenance_desk.utils.ticket_lifecycle import OPEN_STATUSES, STATUS_ORDER

PRIORITY_ORDER = {
    TicketPriority.URGENT: 0,
    TicketPriority.HIGH: 1,
    TicketPriority.MEDIUM: 2,
    TicketPriority.LOW: 3,
}

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_PRIORITY = "priority"
SORT_STATUS = "status"
SORT_OPTIONS = (SORT_NEWEST, SORT_OLDEST, SORT_PRIORITY, SORT_STATUS)


def find_ticket(tickets: Iterable[Ticket], ticket_id: str) -> Optional[Ticket]:
    return next((ticket for ticket in tickets if ticket.id == ticket_id), None)


def get_tickets_by_user(tickets: Iterable[Ticket], user_id: str) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.created_by == user_id]


def get_tickets_by_property(tickets: Iterable[Ticket], property_id: str) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.property_id == property_id]


def get_tickets_by_status(tickets: Iterable[Ticket], status: TicketStatus) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.status == status]


def get_tickets_by_assignee(tickets: Iterable[Ticket], staff_id: str) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.assigned_to == staff_id]


def filter_tickets(
    tickets: Iterable[Ticket],
    search: Optional[str] = None,
    status: Optional[TicketStatus] = None,
    priority: Optional[TicketPriority] = None,
    category: Optional[TicketCategory] = None,
    sort_by: Optional[str] = None,
) -> List[Ticket]:
    """
    Ticket list as shown on the list screen.

    Args:
        search: Case-insensitive match against title and description
        status / priority / category: Exact-match filters, ignored when None
        sort_by: One of SORT_OPTIONS; None keeps snapshot order

    Returns:
        Filtered list. Sorting is stable, so ties keep snapshot order.
    """
    result = list(tickets)

    if search:
        term = search.strip().lower()
        result = [
            ticket for ticket in result
            if term in ticket.title.lower() or term in ticket.description.lower()
        ]
    if status is not None:
        result = [ticket for ticket in result if ticket.status == status]
    if priority is not None:
        result = [ticket for ticket in result if ticket.priority == priority]
    if category is not None:
        result = [ticket for ticket in result if ticket.category == category]

    if sort_by == SORT_NEWEST:
        result.sort(key=lambda t: t.created_at, reverse=True)
    elif sort_by == SORT_OLDEST:
        result.sort(key=lambda t: t.created_at)
    elif sort_by == SORT_PRIORITY:
        result.sort(key=lambda t: PRIORITY_ORDER[t.priority])
    elif sort_by == SORT_STATUS:
        result.sort(key=lambda t: STATUS_ORDER[t.status])
    elif sort_by is not None:
        raise ValidationError(
            message=f"sort_by must be one of: {', '.join(SORT_OPTIONS)}",
            context={"field": "sort_by"},
        )

    return result


def open_tickets(tickets: Iterable[Ticket]) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.status in OPEN_STATUSES]


def urgent_open_tickets(tickets: Iterable[Ticket]) -> List[Ticket]:
    return [
        ticket for ticket in tickets
        if ticket.priority == TicketPriority.URGENT and ticket.status in OPEN_STATUSES
    ]


def upcoming_scheduled(tickets: Iterable[Ticket], now: datetime) -> List[Ticket]:
    """Open tickets with a visit scheduled after ``now``, soonest first."""
    upcoming = [
        ticket for ticket in tickets
        if ticket.scheduled_date is not None
        and ticket.scheduled_date > now
        and ticket.status in OPEN_STATUSES
    ]
    upcoming.sort(key=lambda t: t.scheduled_date)
    return upcoming


def recently_updated(tickets: Iterable[Ticket], limit: int = 5) -> List[Ticket]:
    return sorted(tickets, key=lambda t: t.updated_at, reverse=True)[:limit]


def visible_notes(ticket: Ticket, actor: Optional[Actor]) -> Tuple[TicketNote, ...]:
    """Notes the actor may read; tenants never see private notes."""
    if actor is None or not actor.is_tenant:
        return ticket.notes
    return tuple(note for note in ticket.notes if not note.is_private)


def redact_for(ticket: Ticket, actor: Optional[Actor]) -> Ticket:
    """Ticket copy with the notes the actor may not read removed."""
    notes = visible_notes(ticket, actor)
    if len(notes) == len(ticket.notes):
        return ticket
    return ticket.model_copy(update={"notes": notes})
