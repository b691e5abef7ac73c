from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from maintenance_desk.context import create_context
from maintenance_desk.config import Settings
from maintenance_desk.models import Actor, Staff, TicketCategory, UserRole
from maintenance_desk.store import NotificationStore, StaffDirectory, TicketStore
from maintenance_desk.workflows import AssignmentWorkflow


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable time source; only moves when a test advances it."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


ROSTER = (
    Staff(
        id="staff-1",
        name="Dana Plumber",
        role="Maintenance Staff",
        specialties=frozenset({TicketCategory.PLUMBING, TicketCategory.ELECTRICAL}),
    ),
    Staff(
        id="staff-2",
        name="Sam Rodriguez",
        role="Maintenance Staff",
        specialties=frozenset({TicketCategory.HVAC, TicketCategory.PLUMBING, TicketCategory.OTHER}),
    ),
    Staff(
        id="staff-3",
        name="Acme Pest Control",
        role="Vendor",
        specialties=frozenset({TicketCategory.PEST}),
        available=False,
    ),
)

TENANT = Actor(id="u1", role=UserRole.TENANT)
OTHER_TENANT = Actor(id="u2", role=UserRole.TENANT)
STAFF = Actor(id="staff-2", role=UserRole.STAFF)
MANAGER = Actor(id="m1", role=UserRole.MANAGER)


def ticket_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "title": "Leaky faucet",
        "description": "Kitchen sink leaking",
        "category": "plumbing",
        "priority": "medium",
        "created_by": "u1",
        "property_id": "p1",
        "unit_number": "101",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TicketStore(clock=clock)


@pytest.fixture
def strict_store(clock):
    return TicketStore(clock=clock, strict_transitions=True)


@pytest.fixture
def directory():
    return StaffDirectory(ROSTER)


@pytest.fixture
def workflow(store, directory, clock):
    return AssignmentWorkflow(store, directory, clock=clock)


@pytest.fixture
def notifications(clock):
    return NotificationStore(clock=clock)


@pytest.fixture
def make_ticket(store):
    def _factory(**overrides):
        return store.create(ticket_payload(**overrides))

    return _factory


@pytest.fixture
def context(clock):
    config = Settings(seed_demo_data=False)
    return create_context(config, staff=ROSTER, clock=clock)
