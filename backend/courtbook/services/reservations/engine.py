# backend/courtbook/services/reservations/engine.py
"""
Reservation engine: commits a customer's slot selection as one unit.

Algorithm:
1. Normalise the selection (non-empty, known labels, no duplicates)
2. Re-read the reservation set of the date and re-check every slot is free
3. Resolve payment status from the payment method
4. Build one reservation per slot at the per-block price
5. Insert them in one transaction (unique (date, slot) → all or nothing)
6. Publish a change for the date

Step 2 gives a precise error in the common case. Step 5 closes the race
window between two clients that both saw a slot as free.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Iterable

from ...constants import PaymentMethod
from ...schemas.reservations import ReservationDraft, ReservationRead
from ..slots.availability import SlotState, derive_availability
from ..slots.config import CourtConfig
from .errors import InvalidRequest, SlotConflict
from .payment import CENTS, Quote, quote_blocks, resolve_payment_status
from .store import ReservationStore

logger = logging.getLogger(__name__)


class ReservationEngine:

    def __init__(self, store: ReservationStore, feed, config: CourtConfig):
        self.store = store
        self.feed = feed
        self.config = config

    def normalize_slots(self, slots: Iterable[str]) -> list[str]:
        """
        Validate a selection and return it in calendar order without duplicates.

        Raises:
            InvalidRequest: empty selection or a label outside the calendar
        """
        requested = set(slots)
        if not requested:
            raise InvalidRequest("Select at least one time slot.")

        unknown = sorted(s for s in requested if not self.config.is_slot(s))
        if unknown:
            raise InvalidRequest(
                f"Not a bookable time: {', '.join(unknown)}.",
                details={"slots": unknown},
            )

        return [s for s in self.config.slots if s in requested]

    def quote(self, slots: Iterable[str]) -> Quote:
        """Total to pay for a selection, before committing it."""
        return quote_blocks(len(self.normalize_slots(slots)), self.config)

    async def commit_reservation(
        self,
        day: date,
        slots: Iterable[str],
        owner,
        payment_method: PaymentMethod,
    ) -> list[ReservationRead]:
        """
        Reserve every requested slot of `day` for `owner`, or none of them.

        Args:
            day: Calendar date
            slots: Slot labels ("HH:MM")
            owner: Booking identity (.identity_id, .email)
            payment_method: Chosen payment method

        Returns:
            Created reservations in calendar order

        Raises:
            InvalidRequest: empty selection / unknown slot
            SlotConflict: a slot is no longer free; nothing committed
            PersistenceFailure: store error; nothing committed, not retried
        """
        requested = self.normalize_slots(slots)

        # Latest data, read after the commit attempt started
        latest = await asyncio.to_thread(self.store.for_date, day)
        availability = derive_availability(requested, latest, owner.identity_id)
        conflicts = [s for s in requested if availability[s] is not SlotState.FREE]
        if conflicts:
            logger.info(f"Commit by {owner.identity_id} on {day} rejected, taken: {conflicts}")
            raise SlotConflict(conflicts)

        payment_status = resolve_payment_status(payment_method)
        now = datetime.now(timezone.utc)
        price = self.config.price_per_block.quantize(CENTS)

        drafts = [
            ReservationDraft(
                date=day,
                slot=slot,
                owner_id=owner.identity_id,
                owner_email=owner.email,
                price=price,
                payment_method=payment_method,
                payment_status=payment_status,
                created_at=now,
            )
            for slot in requested
        ]

        created = await asyncio.to_thread(self.store.put_many, drafts)

        logger.info(
            f"Reserved {day} {requested} for {owner.identity_id}: "
            f"{PaymentMethod(payment_method).value} → {payment_status.value}"
        )

        await self.feed.publish(day, "created")
        return created
