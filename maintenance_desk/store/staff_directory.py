"""
Read-only roster of staff members and vendors.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from maintenance_desk.models import Staff, TicketCategory
from maintenance_desk.security.error_handler import NotFoundError, ValidationError
from maintenance_desk.store.ticket_store import parse_input


class StaffDirectory:
    """Roster consumed by the assignment workflow; it is never mutated."""

    def __init__(self, members: Iterable[Union[Staff, Dict[str, Any]]] = ()) -> None:
        roster = tuple(parse_input(Staff, member) for member in members)
        ids = [member.id for member in roster]
        if len(ids) != len(set(ids)):
            raise ValidationError(message="Staff ids must be unique", context={"field": "id"})
        self._members: Tuple[Staff, ...] = roster

    @property
    def members(self) -> Tuple[Staff, ...]:
        return self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    def find(self, staff_id: str) -> Optional[Staff]:
        return next((member for member in self._members if member.id == staff_id), None)

    def get(self, staff_id: str) -> Staff:
        member = self.find(staff_id)
        if member is None:
            raise NotFoundError("Staff", staff_id)
        return member

    def eligible(self, category: Optional[TicketCategory] = None) -> List[Staff]:
        """Available members whose specialties cover ``category`` (any when None)."""
        return [member for member in self._members if member.handles(category)]

    def search(
        self,
        term: Optional[str] = None,
        role: Optional[str] = None,
        specialty: Optional[TicketCategory] = None,
    ) -> List[Staff]:
        """Roster filter used by the staff list screen."""
        result = list(self._members)
        if term:
            needle = term.strip().lower()
            result = [m for m in result if needle in m.name.lower() or needle in m.role.lower()]
        if role:
            result = [m for m in result if role.lower() in m.role.lower()]
        if specialty is not None:
            result = [m for m in result if specialty in m.specialties]
        return result
