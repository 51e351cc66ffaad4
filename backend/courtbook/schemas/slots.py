# backend/courtbook/schemas/slots.py
"""
Pydantic schemas for slots and day views.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ..services.slots import SlotState
from .reservations import ReservationRead


class SlotInfo(BaseModel):
    """State of a single slot for the viewer."""
    time: str  # "HH:MM"
    ends_at: str  # "HH:MM"
    state: SlotState

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Calendar of a day with per-slot state."""
    date: date
    slots: list[SlotInfo]
    free_count: int

    # Metadata
    open_hour: int
    close_hour: int
    price_per_block: Decimal
    slot_step_minutes: int = Field(description="Block length in minutes")


class RevenueRead(BaseModel):
    date: date
    paid_total: Decimal
    pending_total: Decimal
    paid_count: int
    pending_count: int
    currency: str


class CustomerDayView(BaseModel):
    """What a customer sees for a day."""
    kind: str = "customer"
    date: date
    version: int
    slots: list[SlotInfo]
    mine: list[ReservationRead]


class AdminDayView(BaseModel):
    """What an administrator sees for a day."""
    kind: str = "admin"
    date: date
    version: int
    reservations: list[ReservationRead]
    revenue: RevenueRead
