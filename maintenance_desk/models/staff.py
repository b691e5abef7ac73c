"""
Staff directory models
"""
from pydantic import BaseModel
from typing import FrozenSet, Optional

from .ticket import TicketCategory


class Staff(BaseModel):
    """Staff member or outside vendor that can be assigned to tickets"""
    id: str
    name: str
    role: str
    specialties: FrozenSet[TicketCategory] = frozenset()
    available: bool = True
    avatar: Optional[str] = None

    class Config:
        frozen = True

    def handles(self, category: Optional[TicketCategory]) -> bool:
        """True when the member is available and covers the category"""
        if not self.available:
            return False
        return category is None or category in self.specialties
