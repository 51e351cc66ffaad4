# backend/courtbook/services/reservations/__init__.py
"""
Reservation engine, cancellation, revenue and persistence.
"""

from .errors import (
    BookingError,
    InvalidRequest,
    PersistenceFailure,
    ReservationNotFound,
    SlotConflict,
    Unauthorized,
)
from .store import ReservationStore
from .payment import Quote, resolve_payment_status
from .engine import ReservationEngine
from .cancellation import CancellationService
from .revenue import RevenueSummary, aggregate

__all__ = [
    "BookingError",
    "InvalidRequest",
    "PersistenceFailure",
    "ReservationNotFound",
    "SlotConflict",
    "Unauthorized",
    "ReservationStore",
    "Quote",
    "resolve_payment_status",
    "ReservationEngine",
    "CancellationService",
    "RevenueSummary",
    "aggregate",
]
