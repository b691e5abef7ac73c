"""
Aggregate statistics consumed by the dashboards and analytics screens.

All aggregates fall back to 0 on an empty input instead of dividing by zero.
"""
from collections import Counter
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from maintenance_desk.models import Ticket, TicketCategory, TicketPriority, TicketStatus
from maintenance_desk.utils.ticket_lifecycle import COMPLETED_STATUSES, OPEN_STATUSES

_SECONDS_PER_HOUR = 3600.0


class StaffMetrics(BaseModel):
    """Per-staff performance figures"""
    staff_id: str
    total_assigned: int = 0
    completed: int = 0
    avg_resolution_hours: float = 0.0
    avg_rating: float = 0.0
    current_load: int = 0


class DashboardSummary(BaseModel):
    """Counts shown on the tenant and staff dashboards"""
    total: int = 0
    active: int = 0
    completed: int = 0
    urgent_open: int = 0


class TicketStatistics(BaseModel):
    """Everything the manager analytics screen needs in one pass"""
    total_tickets: int = 0
    resolved_tickets: int = 0
    resolution_rate: float = 0.0
    avg_resolution_hours: float = 0.0
    total_cost: float = 0.0
    average_cost: float = 0.0
    avg_satisfaction: float = 0.0
    feedback_count: int = 0
    category_distribution: Dict[str, int] = {}
    status_distribution: Dict[str, int] = {}
    rating_distribution: Dict[int, int] = {}
    cost_by_category: Dict[str, float] = {}


def completed_tickets(tickets: Iterable[Ticket]) -> List[Ticket]:
    return [ticket for ticket in tickets if ticket.status in COMPLETED_STATUSES]


def resolution_rate(tickets: Iterable[Ticket]) -> float:
    """Share of tickets that are resolved or closed, in [0, 1]."""
    tickets = list(tickets)
    if not tickets:
        return 0.0
    return len(completed_tickets(tickets)) / len(tickets)


def resolution_hours(ticket: Ticket) -> float:
    finished = ticket.completed_date or ticket.updated_at
    return (finished - ticket.created_at).total_seconds() / _SECONDS_PER_HOUR


def average_resolution_hours(tickets: Iterable[Ticket]) -> float:
    """Mean time from creation to completion over resolved/closed tickets."""
    done = completed_tickets(tickets)
    if not done:
        return 0.0
    return sum(resolution_hours(ticket) for ticket in done) / len(done)


def category_distribution(tickets: Iterable[Ticket]) -> Dict[str, int]:
    counts = Counter(ticket.category.value for ticket in tickets)
    return {category.value: counts[category.value] for category in TicketCategory if counts[category.value]}


def status_distribution(tickets: Iterable[Ticket]) -> Dict[str, int]:
    counts = Counter(ticket.status.value for ticket in tickets)
    return {status.value: counts[status.value] for status in TicketStatus}


def total_cost(tickets: Iterable[Ticket]) -> float:
    return float(sum(ticket.cost for ticket in tickets if ticket.cost is not None))


def average_cost(tickets: Iterable[Ticket]) -> float:
    """Mean cost over the tickets that carry one."""
    costs = [ticket.cost for ticket in tickets if ticket.cost is not None]
    if not costs:
        return 0.0
    return sum(costs) / len(costs)


def cost_by_category(tickets: Iterable[Ticket]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for ticket in tickets:
        if ticket.cost is None:
            continue
        totals[ticket.category.value] = totals.get(ticket.category.value, 0.0) + ticket.cost
    return totals


def average_satisfaction(tickets: Iterable[Ticket]) -> float:
    ratings = [ticket.feedback.rating for ticket in tickets if ticket.feedback is not None]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def rating_distribution(tickets: Iterable[Ticket]) -> Dict[int, int]:
    counts = Counter(ticket.feedback.rating for ticket in tickets if ticket.feedback is not None)
    return {rating: counts[rating] for rating in range(1, 6)}


def staff_metrics(tickets: Iterable[Ticket], staff_id: str) -> StaffMetrics:
    assigned = [ticket for ticket in tickets if ticket.assigned_to == staff_id]
    done = completed_tickets(assigned)
    return StaffMetrics(
        staff_id=staff_id,
        total_assigned=len(assigned),
        completed=len(done),
        avg_resolution_hours=average_resolution_hours(done),
        avg_rating=average_satisfaction(done),
        current_load=len(assigned) - len(done),
    )


def _summary(tickets: List[Ticket], active_statuses) -> DashboardSummary:
    return DashboardSummary(
        total=len(tickets),
        active=sum(1 for ticket in tickets if ticket.status in active_statuses),
        completed=len(completed_tickets(tickets)),
        urgent_open=sum(
            1 for ticket in tickets
            if ticket.priority == TicketPriority.URGENT and ticket.status in OPEN_STATUSES
        ),
    )


def tenant_summary(tickets: Iterable[Ticket], user_id: str) -> DashboardSummary:
    """Tenant view: on-hold tickets are neither active nor completed."""
    own = [ticket for ticket in tickets if ticket.created_by == user_id]
    return _summary(own, {TicketStatus.NEW, TicketStatus.ASSIGNED, TicketStatus.IN_PROGRESS})


def staff_summary(tickets: Iterable[Ticket], staff_id: str) -> DashboardSummary:
    assigned = [ticket for ticket in tickets if ticket.assigned_to == staff_id]
    return _summary(assigned, {TicketStatus.ASSIGNED, TicketStatus.IN_PROGRESS})


def summarize(tickets: Iterable[Ticket], property_id: Optional[str] = None) -> TicketStatistics:
    tickets = list(tickets)
    if property_id is not None:
        tickets = [ticket for ticket in tickets if ticket.property_id == property_id]

    with_feedback = [ticket for ticket in tickets if ticket.feedback is not None]
    return TicketStatistics(
        total_tickets=len(tickets),
        resolved_tickets=len(completed_tickets(tickets)),
        resolution_rate=resolution_rate(tickets),
        avg_resolution_hours=average_resolution_hours(tickets),
        total_cost=total_cost(tickets),
        average_cost=average_cost(tickets),
        avg_satisfaction=average_satisfaction(tickets),
        feedback_count=len(with_feedback),
        category_distribution=category_distribution(tickets),
        status_distribution=status_distribution(tickets),
        rating_distribution=rating_distribution(tickets),
        cost_by_category=cost_by_category(tickets),
    )
