# backend/courtbook/services/reservations/errors.py
"""
Errors raised by the reservation engine and the cancellation service.

Each error carries a short human-readable message for the end user.
The HTTP layer converts them with to_http_exception().
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class BookingError(Exception):
    """Base class for reservation errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "booking_error"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class InvalidRequest(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_request"


class SlotConflict(BookingError):
    """Requested slot(s) are no longer free. The user must re-select."""

    status_code = status.HTTP_409_CONFLICT
    code = "slot_conflict"

    def __init__(self, slots: list[str]) -> None:
        self.slots = sorted(slots)
        label = ", ".join(self.slots)
        super().__init__(
            f"Already reserved: {label}. Please choose another time.",
            details={"slots": self.slots},
        )


class PersistenceFailure(BookingError):
    """Store read/write failed. Retryable by the user, never retried automatically."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "persistence_failure"

    def __init__(self, message: str = "Could not reach the reservation store. Please try again.") -> None:
        super().__init__(message)


class Unauthorized(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "unauthorized"

    def __init__(self, message: str = "You can only cancel your own reservations.") -> None:
        super().__init__(message)


class ReservationNotFound(BookingError):
    """Cancellation target is gone; callers treat it as already resolved."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "reservation_not_found"

    def __init__(self, reservation_id: int) -> None:
        self.reservation_id = reservation_id
        super().__init__(
            "Reservation not found. It may have already been cancelled.",
            details={"reservation_id": reservation_id},
        )
