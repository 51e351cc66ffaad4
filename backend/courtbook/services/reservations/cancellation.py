# backend/courtbook/services/reservations/cancellation.py
"""
Cancellation: hard delete of one reservation by its owner or an admin.
"""

import asyncio
import logging

from ...constants import Role
from ...schemas.reservations import ReservationRead
from .errors import ReservationNotFound, Unauthorized
from .store import ReservationStore

logger = logging.getLogger(__name__)


class CancellationService:

    def __init__(self, store: ReservationStore, feed):
        self.store = store
        self.feed = feed

    async def cancel(
        self,
        reservation_id: int,
        requester_id: str,
        requester_role: Role,
    ) -> ReservationRead:
        """
        Remove a reservation permanently.

        Returns:
            The removed reservation

        Raises:
            ReservationNotFound: no such reservation (already resolved)
            Unauthorized: requester is neither the owner nor an admin
            PersistenceFailure: store error, not retried
        """
        reservation = await asyncio.to_thread(self.store.get, reservation_id)
        if reservation is None:
            raise ReservationNotFound(reservation_id)

        is_admin = Role(requester_role) is Role.ADMIN
        if not is_admin and reservation.owner_id != requester_id:
            logger.warning(
                f"Cancellation of {reservation_id} denied for {requester_id} "
                f"(owner {reservation.owner_id})"
            )
            raise Unauthorized()

        deleted = await asyncio.to_thread(self.store.delete, reservation_id)
        if not deleted:
            # Removed concurrently between get() and delete()
            raise ReservationNotFound(reservation_id)

        logger.info(
            f"Reservation {reservation_id} ({reservation.date} {reservation.slot}) "
            f"cancelled by {'admin ' if is_admin else ''}{requester_id}"
        )

        await self.feed.publish(reservation.date, "cancelled")
        return reservation
