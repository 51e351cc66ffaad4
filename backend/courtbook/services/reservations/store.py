# backend/courtbook/services/reservations/store.py
"""
Reservation persistence.

The (date, slot) uniqueness rule lives in the table itself
(uq_reservations_date_slot). put_many() inserts a whole request in one
transaction, so a batch is committed completely or not at all.

All methods are blocking; async callers run them via asyncio.to_thread().
Every SQLAlchemy error is converted to PersistenceFailure at this boundary.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...models import Reservations as DBReservation
from ...schemas.reservations import ReservationDraft, ReservationRead
from .errors import PersistenceFailure, SlotConflict

logger = logging.getLogger(__name__)


class ReservationStore:
    """SQL-backed reservation collection."""

    QUERYABLE_FIELDS = frozenset({
        "date",
        "slot",
        "owner_id",
        "payment_method",
        "payment_status",
    })

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # ── Write ────────────────────────────────────────────────────────────

    def put(self, draft: ReservationDraft) -> int:
        """Insert a single reservation and return its id."""
        return self.put_many([draft])[0].id

    def put_many(self, drafts: list[ReservationDraft]) -> list[ReservationRead]:
        """
        Insert all drafts in one transaction.

        Raises:
            SlotConflict: a (date, slot) pair is already taken; nothing inserted
            PersistenceFailure: any other store error; nothing inserted
        """
        if not drafts:
            return []

        try:
            with self._session_factory() as db:
                rows = [
                    DBReservation(**draft.model_dump(mode="python"))
                    for draft in drafts
                ]
                db.add_all(rows)
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    taken = self._taken_slots(db, drafts)
                    if not taken:
                        raise
                    logger.info(
                        f"Batch rejected by unique constraint on {drafts[0].date}: {taken}"
                    )
                    raise SlotConflict(taken) from None

                return [ReservationRead.model_validate(row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Failed to store {len(drafts)} reservation(s): {e}")
            raise PersistenceFailure(
                "Could not save the reservation. Please try again."
            ) from e

    def delete(self, reservation_id: int) -> bool:
        """Hard delete. Returns False when nothing was deleted."""
        try:
            with self._session_factory() as db:
                obj = db.get(DBReservation, reservation_id)
                if obj is None:
                    return False
                db.delete(obj)
                db.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete reservation {reservation_id}: {e}")
            raise PersistenceFailure(
                "Could not cancel the reservation. Please try again."
            ) from e

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, reservation_id: int) -> ReservationRead | None:
        try:
            with self._session_factory() as db:
                obj = db.get(DBReservation, reservation_id)
                return ReservationRead.model_validate(obj) if obj else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load reservation {reservation_id}: {e}")
            raise PersistenceFailure() from e

    def query_by_field(self, field: str, value: Any) -> list[ReservationRead]:
        """
        Equality query on one whitelisted column, ordered by date and slot.
        """
        if field not in self.QUERYABLE_FIELDS:
            raise ValueError(f"Cannot query reservations by {field!r}")

        column = getattr(DBReservation, field)
        try:
            with self._session_factory() as db:
                rows = (
                    db.query(DBReservation)
                    .filter(column == value)
                    .order_by(DBReservation.date, DBReservation.slot)
                    .all()
                )
                return [ReservationRead.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to query reservations by {field}: {e}")
            raise PersistenceFailure() from e

    def for_date(self, day: date) -> list[ReservationRead]:
        """Full reservation set of a day, ordered by slot."""
        return self.query_by_field("date", day)

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _taken_slots(db: Session, drafts: list[ReservationDraft]) -> list[str]:
        """Requested slots that already have a reservation."""
        taken: set[str] = set()
        by_date: dict[date, set[str]] = {}
        for draft in drafts:
            by_date.setdefault(draft.date, set()).add(draft.slot)

        for day, slots in by_date.items():
            rows = (
                db.query(DBReservation.slot)
                .filter(
                    DBReservation.date == day,
                    DBReservation.slot.in_(slots),
                )
                .all()
            )
            taken.update(slot for (slot,) in rows)

        return sorted(taken)
