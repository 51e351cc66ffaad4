import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from courtbook.constants import PaymentMethod, PaymentStatus
from courtbook.schemas.reservations import ReservationDraft
from courtbook.services.reservations import InvalidRequest, PersistenceFailure, SlotConflict

from .conftest import DAY, broken_session_factory


@pytest.mark.asyncio
async def test_commit_then_conflict_scenario(ctx, alice, bob):
    created = await ctx.engine.commit_reservation(
        DAY, ["09:30", "09:00"], alice, PaymentMethod.CARD_SIMULATED
    )

    assert [r.slot for r in created] == ["09:00", "09:30"]
    assert {r.owner_id for r in created} == {"alice"}
    assert {r.payment_status for r in created} == {PaymentStatus.PAID}
    assert all(r.price == Decimal("67.50") for r in created)

    with pytest.raises(SlotConflict) as exc:
        await ctx.engine.commit_reservation(
            DAY, ["09:30", "10:00"], bob, PaymentMethod.ON_SITE
        )

    assert exc.value.slots == ["09:30"]
    assert "09:30" in exc.value.message

    stored = ctx.reservations.for_date(DAY)
    assert [(r.slot, r.owner_id) for r in stored] == [("09:00", "alice"), ("09:30", "alice")]


@pytest.mark.asyncio
async def test_stale_read_is_caught_by_store(ctx, alice, bob, monkeypatch):
    await ctx.engine.commit_reservation(DAY, ["18:00"], bob, PaymentMethod.ON_SITE)

    # Alice's pre-check sees an outdated, empty day
    monkeypatch.setattr(ctx.reservations, "for_date", lambda day: [])

    with pytest.raises(SlotConflict) as exc:
        await ctx.engine.commit_reservation(
            DAY, ["17:30", "18:00"], alice, PaymentMethod.CARD_SIMULATED
        )

    assert exc.value.slots == ["18:00"]

    monkeypatch.undo()
    stored = ctx.reservations.for_date(DAY)
    assert [(r.slot, r.owner_id) for r in stored] == [("18:00", "bob")]


@pytest.mark.asyncio
async def test_concurrent_commits_exactly_one_wins(ctx, alice, bob):
    results = await asyncio.gather(
        ctx.engine.commit_reservation(DAY, ["20:00", "20:30"], alice, PaymentMethod.ON_SITE),
        ctx.engine.commit_reservation(DAY, ["20:30", "21:00"], bob, PaymentMethod.ON_SITE),
        return_exceptions=True,
    )

    conflicts = [r for r in results if isinstance(r, SlotConflict)]
    successes = [r for r in results if isinstance(r, list)]
    assert len(conflicts) == 1
    assert len(successes) == 1
    assert conflicts[0].slots == ["20:30"]

    stored = ctx.reservations.for_date(DAY)
    owners = {r.owner_id for r in stored}
    assert len(owners) == 1
    assert [r.slot for r in stored] == [r.slot for r in successes[0]]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, expected",
    [
        (PaymentMethod.ON_SITE, PaymentStatus.PENDING),
        (PaymentMethod.CARD_SIMULATED, PaymentStatus.PAID),
        (PaymentMethod.INSTANT_TRANSFER_SIMULATED, PaymentStatus.PAID),
    ],
)
async def test_payment_status_follows_method(ctx, alice, method, expected):
    created = await ctx.engine.commit_reservation(DAY, ["12:00"], alice, method)

    assert created[0].payment_method == method
    assert created[0].payment_status == expected


@pytest.mark.asyncio
async def test_duplicate_labels_collapse(ctx, alice):
    created = await ctx.engine.commit_reservation(
        DAY, ["10:00", "10:00", "08:00"], alice, PaymentMethod.ON_SITE
    )

    assert [r.slot for r in created] == ["08:00", "10:00"]


@pytest.mark.asyncio
async def test_empty_selection_rejected(ctx, alice):
    with pytest.raises(InvalidRequest, match="at least one"):
        await ctx.engine.commit_reservation(DAY, [], alice, PaymentMethod.ON_SITE)


@pytest.mark.asyncio
async def test_unknown_slot_rejected(ctx, alice):
    with pytest.raises(InvalidRequest) as exc:
        await ctx.engine.commit_reservation(
            DAY, ["07:30", "09:00", "09:15"], alice, PaymentMethod.ON_SITE
        )

    assert exc.value.details == {"slots": ["07:30", "09:15"]}
    assert ctx.reservations.for_date(DAY) == []


@pytest.mark.asyncio
async def test_store_failure_commits_nothing(ctx, alice, monkeypatch):
    monkeypatch.setattr(ctx.reservations, "_session_factory", broken_session_factory)

    with pytest.raises(PersistenceFailure):
        await ctx.engine.commit_reservation(DAY, ["09:00"], alice, PaymentMethod.ON_SITE)


@pytest.mark.asyncio
async def test_commit_publishes_change(ctx, alice):
    async with ctx.feed.listen(DAY) as events:
        await ctx.engine.commit_reservation(DAY, ["15:00"], alice, PaymentMethod.ON_SITE)
        event = await asyncio.wait_for(anext(events), timeout=1)

    assert event["type"] == "reservations.changed"
    assert event["date"] == DAY.isoformat()
    assert event["reason"] == "created"


def test_quote(ctx):
    quote = ctx.engine.quote(["09:00", "09:30", "10:00"])

    assert quote.blocks == 3
    assert quote.price_per_block == Decimal("67.50")
    assert quote.total == Decimal("202.50")
    assert quote.currency == "BRL"


def test_put_many_rejects_taken_slot_atomically(ctx, alice, bob):
    def draft(slot, owner):
        return ReservationDraft(
            date=DAY,
            slot=slot,
            owner_id=owner.identity_id,
            owner_email=owner.email,
            price=Decimal("67.50"),
            payment_method=PaymentMethod.ON_SITE,
            payment_status=PaymentStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )

    ctx.reservations.put(draft("11:00", bob))

    with pytest.raises(SlotConflict) as exc:
        ctx.reservations.put_many([draft("10:30", alice), draft("11:00", alice)])

    assert exc.value.slots == ["11:00"]
    assert [r.slot for r in ctx.reservations.for_date(DAY)] == ["11:00"]


def test_query_by_unknown_field_rejected(ctx):
    with pytest.raises(ValueError):
        ctx.reservations.query_by_field("price", 1)


@pytest.mark.asyncio
async def test_created_at_is_utc(ctx, alice):
    [created] = await ctx.engine.commit_reservation(DAY, ["16:00"], alice, PaymentMethod.ON_SITE)

    assert created.created_at.tzinfo is not None
    assert created.created_at.utcoffset().total_seconds() == 0

    [stored] = ctx.reservations.for_date(DAY)
    assert stored.created_at == created.created_at
    assert stored.created_at.tzinfo is not None
