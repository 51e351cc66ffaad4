# backend/courtbook/schemas/reservations.py

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ..constants import PaymentMethod, PaymentStatus


class ReservationDraft(BaseModel):
    """A reservation built by the engine, not yet persisted."""
    date: date
    slot: str
    owner_id: str
    owner_email: Optional[str] = None
    price: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime

    model_config = {"use_enum_values": True}


class ReservationRead(BaseModel):
    id: int

    date: date
    slot: str

    owner_id: str
    owner_email: Optional[str] = None

    price: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus

    created_at: datetime

    model_config = {"from_attributes": True, "frozen": True}


class ReservationCreate(BaseModel):
    date: date
    slots: list[str] = Field(description='Slot labels, e.g. ["09:00", "09:30"]')
    payment_method: PaymentMethod = PaymentMethod.ON_SITE


class ReservationCommitResponse(BaseModel):
    message: str
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    total: Decimal
    reservations: list[ReservationRead]


class QuoteRequest(BaseModel):
    slots: list[str]


class QuoteResponse(BaseModel):
    blocks: int
    price_per_block: Decimal
    total: Decimal
    currency: str


class CancelResponse(BaseModel):
    message: str
    reservation: ReservationRead
