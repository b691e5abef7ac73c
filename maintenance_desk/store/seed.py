"""
Deterministic demo data loaded at startup when ``seed_demo_data`` is enabled.
"""
from maintenance_desk.models import Staff, TicketCategory

DEMO_STAFF = (
    Staff(
        id="2",
        name="Sam Rodriguez",
        role="Maintenance Staff",
        specialties=frozenset({
            TicketCategory.PLUMBING,
            TicketCategory.ELECTRICAL,
            TicketCategory.HVAC,
            TicketCategory.APPLIANCE,
            TicketCategory.STRUCTURAL,
            TicketCategory.OTHER,
        }),
        available=True,
        avatar="https://images.pexels.com/photos/91227/pexels-photo-91227.jpeg",
    ),
)
