# backend/courtbook/services/sessions.py
"""
Principal sessions.

The role is looked up once when a session opens and fixes the variant:
CustomerSession or AdminSession. Each variant renders a day snapshot into
its own view; callers branch on the variant type, never on role fields.
"""

from dataclasses import dataclass
from typing import Union

from ..constants import Role
from ..schemas.slots import AdminDayView, CustomerDayView, RevenueRead, SlotInfo
from .live_sync import DaySnapshot
from .reservations.revenue import aggregate
from .roles import RoleStore
from .slots import CourtConfig, derive_availability, reservations_of, slot_end


@dataclass(frozen=True)
class Identity:
    """What the identity provider vouches for."""
    identity_id: str
    email: str | None = None


@dataclass(frozen=True)
class CustomerSession:
    identity: Identity
    role = Role.CUSTOMER

    def render(self, snapshot: DaySnapshot, court: CourtConfig) -> CustomerDayView:
        return CustomerDayView(
            date=snapshot.date,
            version=snapshot.version,
            slots=slot_infos(court, snapshot.reservations, self.identity.identity_id),
            mine=reservations_of(snapshot.reservations, self.identity.identity_id),
        )


@dataclass(frozen=True)
class AdminSession:
    identity: Identity
    role = Role.ADMIN

    def render(self, snapshot: DaySnapshot, court: CourtConfig) -> AdminDayView:
        return AdminDayView(
            date=snapshot.date,
            version=snapshot.version,
            reservations=sorted(snapshot.reservations, key=lambda r: r.slot),
            revenue=revenue_read(snapshot, court),
        )


PrincipalSession = Union[CustomerSession, AdminSession]


def open_session(identity: Identity, roles: RoleStore) -> PrincipalSession:
    if roles.get_role(identity.identity_id) is Role.ADMIN:
        return AdminSession(identity)
    return CustomerSession(identity)


def slot_infos(court: CourtConfig, reservations, self_id: str | None) -> list[SlotInfo]:
    availability = derive_availability(court.slots, reservations, self_id)
    return [
        SlotInfo(time=slot, ends_at=slot_end(slot), state=state)
        for slot, state in availability.items()
    ]


def revenue_read(snapshot: DaySnapshot, court: CourtConfig) -> RevenueRead:
    summary = aggregate(snapshot.reservations)
    return RevenueRead(
        date=snapshot.date,
        paid_total=summary.paid_total,
        pending_total=summary.pending_total,
        paid_count=summary.paid_count,
        pending_count=summary.pending_count,
        currency=court.currency,
    )
