# backend/courtbook/services/slots/calendar.py
"""
Slot calendar: the fixed set of bookable half-hour blocks of a day.

A slot is identified by its start label "HH:MM". Labels are derived purely
from the operating window, so there is no persisted slot entity.
"""

from .config import SLOT_STEP_MINUTES, minutes_to_time_str, time_str_to_minutes


def generate_slots(start_hour: int, end_hour: int) -> list[str]:
    """
    Generate slot labels for start_hour <= h < end_hour.

    Two labels per hour (":00" and ":30"), ordered by time.
    An empty window (start_hour >= end_hour) yields no slots.
    """
    slots: list[str] = []
    t = start_hour * 60
    end_min = end_hour * 60

    while t < end_min:
        slots.append(minutes_to_time_str(t))
        t += SLOT_STEP_MINUTES

    return slots


def slot_end(label: str) -> str:
    """End label of the block starting at label ("21:30" → "22:00")."""
    return minutes_to_time_str(time_str_to_minutes(label) + SLOT_STEP_MINUTES)
