from decimal import Decimal

import pytest

from courtbook.constants import PaymentMethod
from courtbook.routers.reservations import day_view_events
from courtbook.services.sessions import AdminSession, CustomerSession
from courtbook.services.slots import SlotState

from .conftest import DAY


@pytest.mark.asyncio
async def test_customer_view(ctx, alice, bob):
    await ctx.engine.commit_reservation(DAY, ["09:00"], alice, PaymentMethod.ON_SITE)
    await ctx.engine.commit_reservation(DAY, ["09:30"], bob, PaymentMethod.CARD_SIMULATED)
    snap = await ctx.live_sync.snapshot(DAY, version=4)

    view = CustomerSession(alice).render(snap, ctx.court)

    assert view.kind == "customer"
    assert view.version == 4
    states = {s.time: s.state for s in view.slots}
    assert len(states) == 28
    assert states["09:00"] is SlotState.HELD_BY_SELF
    assert states["09:30"] is SlotState.HELD_BY_OTHER
    assert states["10:00"] is SlotState.FREE
    assert [r.slot for r in view.mine] == ["09:00"]


@pytest.mark.asyncio
async def test_admin_view(ctx, alice, bob):
    await ctx.engine.commit_reservation(DAY, ["10:00"], bob, PaymentMethod.CARD_SIMULATED)
    await ctx.engine.commit_reservation(DAY, ["09:00"], alice, PaymentMethod.ON_SITE)
    snap = await ctx.live_sync.snapshot(DAY, version=1)

    view = AdminSession(alice).render(snap, ctx.court)

    assert view.kind == "admin"
    assert [r.slot for r in view.reservations] == ["09:00", "10:00"]
    assert view.revenue.paid_total == Decimal("67.50")
    assert view.revenue.pending_total == Decimal("67.50")
    assert view.revenue.currency == "BRL"


@pytest.mark.asyncio
async def test_day_view_events_render_per_role(ctx, alice):
    await ctx.engine.commit_reservation(DAY, ["09:00"], alice, PaymentMethod.ON_SITE)

    events = day_view_events(ctx.live_sync, CustomerSession(alice), ctx.court, DAY)
    first = await anext(events)
    await events.aclose()

    assert first["event"] == "snapshot"
    assert first["id"] == "1"
    assert '"kind":"customer"' in first["data"]
    assert '"held_by_self"' in first["data"]
