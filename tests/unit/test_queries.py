"""
Unit tests for ticket projections
"""
from datetime import timedelta

import pytest

from conftest import MANAGER, TENANT
from maintenance_desk.models import TicketPriority, TicketStatus
from maintenance_desk.projections import queries
from maintenance_desk.security.error_handler import ValidationError


@pytest.fixture
def twenty_tickets(store, clock, make_ticket):
    tickets = []
    for index in range(20):
        clock.advance(minutes=1)
        tickets.append(make_ticket(
            title=f"Request {index}",
            created_by=f"u{index % 3}",
            property_id="p1" if index % 2 else "p2",
        ))
    for index in (2, 5, 9, 13, 17):
        store.change_status(tickets[index].id, "resolved")
    return tickets


@pytest.mark.unit
def test_status_projection_keeps_snapshot_order(store, twenty_tickets):
    resolved = store.get_tickets_by_status("resolved")

    assert [t.id for t in resolved] == [twenty_tickets[i].id for i in (2, 5, 9, 13, 17)]


@pytest.mark.unit
def test_unknown_status_filter_is_rejected(store):
    with pytest.raises(ValidationError):
        store.get_tickets_by_status("archived")


@pytest.mark.unit
def test_user_projection_matches_creator_exactly(store, twenty_tickets):
    for user_id in ("u0", "u1", "u2", "nobody"):
        expected = [t.id for t in store.tickets if t.created_by == user_id]
        assert [t.id for t in store.get_tickets_by_user(user_id)] == expected


@pytest.mark.unit
def test_property_and_assignee_projections(store, clock, twenty_tickets):
    store.assign(twenty_tickets[0].id, "staff-1", clock.now + timedelta(days=1))
    store.assign(twenty_tickets[7].id, "staff-1", clock.now + timedelta(days=1))

    assert len(store.get_tickets_by_property("p1")) == 10
    assert [t.id for t in store.get_tickets_by_assignee("staff-1")] == [
        twenty_tickets[0].id,
        twenty_tickets[7].id,
    ]


@pytest.mark.unit
def test_filter_by_search_and_priority(store, make_ticket):
    make_ticket(title="Leaky faucet", priority="low")
    make_ticket(title="Broken heater", description="Radiator cold", category="hvac", priority="urgent")
    make_ticket(title="Door", description="Heater closet door stuck", category="structural", priority="high")

    found = queries.filter_tickets(store.tickets, search="HEATER")
    assert [t.title for t in found] == ["Broken heater", "Door"]

    urgent = queries.filter_tickets(store.tickets, search="heater", priority=TicketPriority.URGENT)
    assert [t.title for t in urgent] == ["Broken heater"]


@pytest.mark.unit
def test_sorting_options(store, clock, make_ticket):
    first = make_ticket(title="A", priority="low")
    clock.advance(hours=1)
    second = make_ticket(title="B", priority="urgent")
    clock.advance(hours=1)
    third = make_ticket(title="C", priority="low")
    store.change_status(first.id, "in-progress")

    newest = queries.filter_tickets(store.tickets, sort_by=queries.SORT_NEWEST)
    assert [t.id for t in newest] == [third.id, second.id, first.id]

    by_priority = queries.filter_tickets(store.tickets, sort_by=queries.SORT_PRIORITY)
    assert [t.id for t in by_priority] == [second.id, first.id, third.id]

    by_status = queries.filter_tickets(store.tickets, sort_by=queries.SORT_STATUS)
    assert by_status[-1].status == TicketStatus.IN_PROGRESS

    with pytest.raises(ValidationError):
        queries.filter_tickets(store.tickets, sort_by="alphabetical")


@pytest.mark.unit
def test_upcoming_scheduled_is_soonest_first(store, clock, make_ticket):
    later = make_ticket()
    sooner = make_ticket()
    done = make_ticket()
    store.assign(later.id, "staff-1", clock.now + timedelta(days=3))
    store.assign(sooner.id, "staff-1", clock.now + timedelta(days=1))
    store.assign(done.id, "staff-1", clock.now + timedelta(days=2))
    store.change_status(done.id, "resolved")

    upcoming = queries.upcoming_scheduled(store.tickets, clock.now)
    assert [t.id for t in upcoming] == [sooner.id, later.id]


@pytest.mark.unit
def test_private_notes_hidden_from_tenants(store, make_ticket):
    ticket = make_ticket()
    store.add_note(ticket.id, {"created_by": "u1", "text": "Please knock"})
    ticket = store.add_note(ticket.id, {"created_by": "staff-2", "text": "Tenant unresponsive", "is_private": True})

    assert [n.text for n in queries.redact_for(ticket, TENANT).notes] == ["Please knock"]
    assert len(queries.redact_for(ticket, MANAGER).notes) == 2
    assert len(store.get_ticket(ticket.id).notes) == 2
