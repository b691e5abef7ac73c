"""
Assignment workflow: pick an eligible staff member and a visit date, then
hand the pair to the ticket store.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from maintenance_desk.models import Actor, Staff, Ticket, TicketCategory, as_utc
from maintenance_desk.security import permissions
from maintenance_desk.security.error_handler import ValidationError
from maintenance_desk.store.staff_directory import StaffDirectory
from maintenance_desk.store.ticket_store import Clock, TicketStore, utc_now

logger = logging.getLogger(__name__)


class AssignmentWorkflow:
    """
    Couples staff selection to scheduling.

    Each call is independent: a second assignment of the same ticket simply
    overwrites the first (last write wins).
    """

    def __init__(
        self,
        store: TicketStore,
        directory: StaffDirectory,
        clock: Clock = utc_now,
        min_lead_time: timedelta = timedelta(0),
    ) -> None:
        self.store = store
        self.directory = directory
        self._clock = clock
        self.min_lead_time = min_lead_time

    def eligible_staff(self, category: Optional[TicketCategory] = None) -> List[Staff]:
        """Staff that may take work in ``category``; any category when None."""
        return self.directory.eligible(category)

    def eligible_for_ticket(self, ticket_id: str) -> List[Staff]:
        ticket = self.store.get_ticket(ticket_id)
        return self.eligible_staff(ticket.category)

    def validate_schedule(self, scheduled_date: datetime) -> datetime:
        """Return the date as an aware datetime, rejecting anything not in the future."""
        scheduled_date = as_utc(scheduled_date)

        earliest = self._clock() + self.min_lead_time
        if scheduled_date <= earliest:
            raise ValidationError(
                message="Scheduled date must be in the future.",
                context={"field": "scheduled_date", "earliest": earliest.isoformat()},
            )
        return scheduled_date

    def assign(
        self,
        ticket_id: str,
        staff_id: str,
        scheduled_date: datetime,
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """
        Confirm an assignment.

        Raises:
            NotFoundError: unknown ticket or staff id
            ValidationError: staff member unavailable or lacking the ticket's
                specialty, or a schedule date that is not in the future
            AuthorizationError: actor may not assign tickets
        """
        ticket = self.store.get_ticket(ticket_id)
        if self.store.enforce_authorization:
            permissions.authorize(actor, permissions.ACTION_ASSIGN, ticket=ticket)
        member = self.directory.get(staff_id)

        if not member.handles(ticket.category):
            reason = "is unavailable" if not member.available else f"does not handle {ticket.category.value}"
            logger.warning(f"Staff {staff_id} rejected for ticket {ticket_id}: {reason}")
            raise ValidationError(
                message=f"Staff member {member.name} {reason}.",
                context={"field": "staff_id", "staff_id": staff_id},
            )

        when = self.validate_schedule(scheduled_date)
        return self.store.assign(ticket_id, member.id, when, actor=actor)
