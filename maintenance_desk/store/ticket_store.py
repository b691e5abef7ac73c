"""
In-memory ticket store.

The store owns the canonical ticket collection. Every mutation builds a new
tuple of frozen tickets and swaps it in as a whole, so a caller holding
``store.tickets`` keeps a consistent snapshot no matter what happens next.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from maintenance_desk.models import (
    Actor,
    AuditLog,
    AuditOperation,
    Feedback,
    NoteCreate,
    Ticket,
    TicketCreate,
    TicketNote,
    TicketStatus,
    TicketUpdate,
)
from maintenance_desk.projections import queries
from maintenance_desk.security.error_handler import NotFoundError, ValidationError, from_pydantic
from maintenance_desk.security import permissions
from maintenance_desk.utils import ticket_lifecycle

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ModelT = TypeVar("ModelT", bound=BaseModel)

_TICKETS_ADAPTER = TypeAdapter(List[Ticket])
_AUDIT_ADAPTER = TypeAdapter(List[AuditLog])


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_input(model: Type[ModelT], data: Union[ModelT, Dict[str, Any]]) -> ModelT:
    """Validate caller input, converting pydantic failures into ValidationError."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise from_pydantic(exc) from exc


class TicketStore:
    """
    Canonical ticket collection with one method per lifecycle operation.

    Args:
        clock: Source of "now"; injected so tests control timestamps
        strict_transitions: Enforce the forward status graph and
            post-completion feedback instead of the permissive default
        enforce_authorization: Apply role checks when an actor is supplied
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        strict_transitions: bool = False,
        enforce_authorization: bool = True,
    ) -> None:
        self._clock = clock
        self.strict_transitions = strict_transitions
        self.enforce_authorization = enforce_authorization
        self._tickets: Tuple[Ticket, ...] = ()
        self._audit: Tuple[AuditLog, ...] = ()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def tickets(self) -> Tuple[Ticket, ...]:
        """Current immutable snapshot, in creation order."""
        return self._tickets

    def __len__(self) -> int:
        return len(self._tickets)

    def get_ticket(self, ticket_id: str) -> Ticket:
        ticket = queries.find_ticket(self._tickets, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket", ticket_id)
        return ticket

    def get_tickets_by_user(self, user_id: str) -> List[Ticket]:
        return queries.get_tickets_by_user(self._tickets, user_id)

    def get_tickets_by_property(self, property_id: str) -> List[Ticket]:
        return queries.get_tickets_by_property(self._tickets, property_id)

    def get_tickets_by_status(self, status: Union[TicketStatus, str]) -> List[Ticket]:
        return queries.get_tickets_by_status(self._tickets, self._coerce_status(status))

    def get_tickets_by_assignee(self, staff_id: str) -> List[Ticket]:
        return queries.get_tickets_by_assignee(self._tickets, staff_id)

    def audit_trail(self, ticket_id: Optional[str] = None) -> List[AuditLog]:
        """Recorded mutations, oldest first, optionally for one ticket."""
        if ticket_id is None:
            return list(self._audit)
        return [entry for entry in self._audit if entry.ticket_id == ticket_id]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data: Union[TicketCreate, Dict[str, Any]], actor: Optional[Actor] = None) -> Ticket:
        """Open a new ticket in status ``new`` with no assignee."""
        payload = parse_input(TicketCreate, data)
        self._authorize(actor, permissions.ACTION_CREATE, created_by=payload.created_by)

        now = self._clock()
        ticket = Ticket(
            **payload.model_dump(),
            id=str(uuid.uuid4()),
            status=TicketStatus.NEW,
            created_at=now,
            updated_at=now,
        )
        self._tickets = self._tickets + (ticket,)

        self._record(ticket.id, actor, AuditOperation.CREATE_TICKET, None, {"status": ticket.status.value})
        logger.info(f"Ticket created: {ticket.id} ({ticket.category.value}, {ticket.priority.value})")
        return ticket

    def assign(
        self,
        ticket_id: str,
        staff_id: str,
        scheduled_date: Optional[datetime] = None,
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """
        Bind a ticket to a staff member and visit date and mark it ``assigned``.

        Allowed from any status; re-assigning completed work re-opens it.
        """
        if not staff_id or not staff_id.strip():
            raise ValidationError(message="staff_id must not be empty", context={"field": "staff_id"})

        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_ASSIGN, ticket=ticket)
        ticket_lifecycle.ensure_assignable(ticket, self.strict_transitions)

        changes = ticket_lifecycle.assignment_changes(ticket, staff_id, scheduled_date)
        updated = self._replace(ticket, changes, actor, AuditOperation.ASSIGN_TICKET)
        logger.info(f"Ticket {ticket_id} assigned to {staff_id}")
        return updated

    def change_status(
        self,
        ticket_id: str,
        status: Union[TicketStatus, str],
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """Move a ticket to ``status``, stamping completion on first entry."""
        requested = self._coerce_status(status)
        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_CHANGE_STATUS, ticket=ticket)
        ticket_lifecycle.ensure_transition(ticket, requested, self.strict_transitions)

        changes = ticket_lifecycle.status_side_effects(ticket, requested, self._clock())
        updated = self._replace(ticket, changes, actor, AuditOperation.UPDATE_STATUS)
        logger.info(f"Ticket {ticket_id} status: {ticket.status.value} -> {requested.value}")
        return updated

    def add_note(
        self,
        ticket_id: str,
        note: Union[NoteCreate, Dict[str, Any]],
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """Append a note; notes are never edited, removed or reordered."""
        payload = parse_input(NoteCreate, note)
        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_ADD_NOTE, ticket=ticket, is_private=payload.is_private)

        entry = TicketNote(
            id=str(uuid.uuid4()),
            ticket_id=ticket.id,
            created_by=payload.created_by,
            created_at=self._clock(),
            text=payload.text,
            is_private=payload.is_private,
        )
        updated = self._replace(
            ticket,
            {"notes": ticket.notes + (entry,)},
            actor,
            AuditOperation.ADD_NOTE,
            after={"note_id": entry.id, "is_private": entry.is_private},
        )
        logger.debug("Note %s appended to ticket %s", entry.id, ticket_id)
        return updated

    def add_feedback(
        self,
        ticket_id: str,
        rating: int,
        comment: Optional[str] = None,
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """Record the tenant's 1-5 rating, replacing any earlier feedback."""
        feedback = parse_input(Feedback, {"rating": rating, "comment": comment})
        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_ADD_FEEDBACK, ticket=ticket)

        if self.strict_transitions and not ticket.is_completed:
            raise ValidationError(
                message="Feedback can only be left once the ticket is resolved or closed.",
                context={"field": "status", "status": ticket.status.value},
            )

        updated = self._replace(ticket, {"feedback": feedback}, actor, AuditOperation.ADD_FEEDBACK)
        logger.info(f"Feedback {feedback.rating}/5 recorded for ticket {ticket_id}")
        return updated

    def update(
        self,
        ticket_id: str,
        fields: Union[TicketUpdate, Dict[str, Any]],
        actor: Optional[Actor] = None,
    ) -> Ticket:
        """Shallow-merge the explicitly supplied editable fields."""
        payload = parse_input(TicketUpdate, fields)
        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_UPDATE, ticket=ticket)

        changes = payload.model_dump(exclude_unset=True)
        for name in ("title", "description", "category", "priority", "property_id"):
            if name in changes and changes[name] is None:
                raise ValidationError(message=f"{name} cannot be cleared", context={"field": name})
        if "images" in changes and changes["images"] is None:
            changes["images"] = ()

        return self._replace(ticket, changes, actor, AuditOperation.UPDATE_TICKET)

    def delete(self, ticket_id: str, actor: Optional[Actor] = None) -> None:
        ticket = self.get_ticket(ticket_id)
        self._authorize(actor, permissions.ACTION_DELETE, ticket=ticket)

        self._tickets = tuple(t for t in self._tickets if t.id != ticket_id)
        self._record(ticket_id, actor, AuditOperation.DELETE_TICKET, {"status": ticket.status.value}, None)
        logger.info(f"Ticket deleted: {ticket_id}")

    # ------------------------------------------------------------------
    # Persistence boundary
    # ------------------------------------------------------------------

    def export_snapshot(self) -> Dict[str, Any]:
        """JSON-compatible dump of tickets and audit trail."""
        return {
            "tickets": _TICKETS_ADAPTER.dump_python(list(self._tickets), mode="json"),
            "audit": _AUDIT_ADAPTER.dump_python(list(self._audit), mode="json"),
        }

    def load_snapshot(self, data: Dict[str, Any]) -> None:
        """Replace the collection with a previously exported snapshot."""
        try:
            tickets = _TICKETS_ADAPTER.validate_python(data.get("tickets", []))
            audit = _AUDIT_ADAPTER.validate_python(data.get("audit", []))
        except PydanticValidationError as exc:
            raise from_pydantic(exc) from exc

        self._tickets = tuple(tickets)
        self._audit = tuple(audit)
        logger.info("Loaded snapshot with %d tickets", len(self._tickets))

    def reset(self) -> None:
        self._tickets = ()
        self._audit = ()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _authorize(self, actor: Optional[Actor], action: str, **kwargs) -> None:
        if self.enforce_authorization:
            permissions.authorize(actor, action, **kwargs)

    @staticmethod
    def _coerce_status(status: Union[TicketStatus, str]) -> TicketStatus:
        try:
            return TicketStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in TicketStatus)
            raise ValidationError(
                message=f"status must be one of: {allowed}",
                context={"field": "status", "value": str(status)},
            )

    def _touch(self, ticket: Ticket) -> datetime:
        # updated_at never moves backwards, even if the clock does
        return max(self._clock(), ticket.updated_at)

    def _replace(
        self,
        ticket: Ticket,
        changes: Dict[str, Any],
        actor: Optional[Actor],
        operation: AuditOperation,
        after: Optional[Dict[str, Any]] = None,
    ) -> Ticket:
        updated = ticket.model_copy(update={**changes, "updated_at": self._touch(ticket)})
        self._tickets = tuple(updated if t.id == ticket.id else t for t in self._tickets)

        if after is None:
            before = {name: _jsonable(getattr(ticket, name)) for name in changes}
            after = {name: _jsonable(value) for name, value in changes.items()}
        else:
            before = None
        self._record(ticket.id, actor, operation, before, after)
        return updated

    def _record(
        self,
        ticket_id: str,
        actor: Optional[Actor],
        operation: AuditOperation,
        before: Optional[Dict[str, Any]],
        after: Optional[Dict[str, Any]],
    ) -> None:
        entry = AuditLog(
            id=str(uuid.uuid4()),
            ticket_id=ticket_id,
            actor_id=actor.id if actor else None,
            operation=operation,
            before=before,
            after=after,
            timestamp=self._clock(),
        )
        self._audit = self._audit + (entry,)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    return value
