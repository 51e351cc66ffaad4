# backend/courtbook/services/slots/availability.py
"""
Availability view for one day.

Re-derived from the full reservation set of the date every time that set
changes. Pure functions only: nothing here reads or writes storage.
"""

from enum import Enum
from typing import Iterable


class SlotState(str, Enum):
    FREE = "free"
    HELD_BY_SELF = "held_by_self"
    HELD_BY_OTHER = "held_by_other"


def derive_availability(
    slots: Iterable[str],
    reservations: Iterable,
    self_id: str | None,
) -> dict[str, SlotState]:
    """
    Map every slot to its state for the viewing identity.

    Args:
        slots: Slot labels to classify (calendar order is preserved)
        reservations: Reservations of the date (anything with .slot, .owner_id)
        self_id: Identity of the viewer; None classifies every held slot
                 as held by someone else

    Returns:
        Dict slot → SlotState
    """
    holders = {r.slot: r.owner_id for r in reservations}

    result: dict[str, SlotState] = {}
    for slot in slots:
        owner_id = holders.get(slot)
        if owner_id is None:
            result[slot] = SlotState.FREE
        elif self_id is not None and owner_id == self_id:
            result[slot] = SlotState.HELD_BY_SELF
        else:
            result[slot] = SlotState.HELD_BY_OTHER
    return result


def free_slots(availability: dict[str, SlotState]) -> list[str]:
    return [slot for slot, state in availability.items() if state is SlotState.FREE]


def reservations_of(reservations: Iterable, owner_id: str) -> list:
    """The owner's reservations of the day, sorted by slot."""
    return sorted(
        (r for r in reservations if r.owner_id == owner_id),
        key=lambda r: r.slot,
    )
