"""
Application context: the one place where the stores are constructed.

Consumers receive the context (or one of its stores) explicitly instead of
reaching for module-level singletons. The API builds one per process at
startup; tests build a fresh one per test.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional

from maintenance_desk.config import Settings, settings as default_settings
from maintenance_desk.models import Staff
from maintenance_desk.store import NotificationStore, StaffDirectory, TicketStore, utc_now
from maintenance_desk.store.seed import DEMO_STAFF
from maintenance_desk.store.ticket_store import Clock
from maintenance_desk.workflows import AssignmentWorkflow

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceContext:
    tickets: TicketStore
    notifications: NotificationStore
    staff: StaffDirectory
    assignments: AssignmentWorkflow
    clock: Clock = utc_now

    def reset(self) -> None:
        """Drop all tickets and notifications; the staff roster is kept."""
        self.tickets.reset()
        self.notifications.clear()


def create_context(
    config: Optional[Settings] = None,
    staff: Optional[Iterable[Staff]] = None,
    clock: Clock = utc_now,
) -> MaintenanceContext:
    """
    Build the stores and bind the assignment workflow to them.

    Args:
        config: Settings to honour; defaults to the process-wide settings
        staff: Roster to load; defaults to the demo roster when
            ``seed_demo_data`` is on, otherwise an empty roster
        clock: Source of "now" shared by every store
    """
    config = config or default_settings
    if staff is None:
        staff = DEMO_STAFF if config.seed_demo_data else ()

    tickets = TicketStore(
        clock=clock,
        strict_transitions=config.strict_transitions,
        enforce_authorization=config.enforce_authorization,
    )
    directory = StaffDirectory(staff)
    context = MaintenanceContext(
        tickets=tickets,
        notifications=NotificationStore(clock=clock),
        staff=directory,
        assignments=AssignmentWorkflow(
            tickets,
            directory,
            clock=clock,
            min_lead_time=timedelta(minutes=config.min_schedule_lead_minutes),
        ),
        clock=clock,
    )
    logger.info(
        "Maintenance context ready (staff=%d, strict=%s, authorization=%s)",
        len(directory), config.strict_transitions, config.enforce_authorization,
    )
    return context
