# backend/courtbook/services/slots/__init__.py
"""
Slot calendar and availability view.

Calendar: fixed half-hour grid derived from the operating window
Availability: per-viewer state of each slot, derived from reservations
"""

from .config import CourtConfig
from .calendar import generate_slots, slot_end
from .availability import SlotState, derive_availability, free_slots, reservations_of

__all__ = [
    "CourtConfig",
    "generate_slots",
    "slot_end",
    "SlotState",
    "derive_availability",
    "free_slots",
    "reservations_of",
]
