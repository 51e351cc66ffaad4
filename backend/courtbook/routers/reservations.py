# backend/courtbook/routers/reservations.py
"""
Reservation endpoints.

POST   /reservations/quote   - Price of a selection
POST   /reservations         - Commit a selection (all slots or none)
GET    /reservations/mine    - Caller's reservations of a day
DELETE /reservations/{id}    - Cancel (owner or admin)
GET    /reservations/stream  - SSE: role-specific day view on every change
"""

import asyncio
import logging
from datetime import date
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Query, status
from sse_starlette.sse import EventSourceResponse

from ..context import AppContext
from ..dependencies import get_ctx, get_identity, get_session
from ..schemas.reservations import (
    CancelResponse,
    QuoteRequest,
    QuoteResponse,
    ReservationCommitResponse,
    ReservationCreate,
    ReservationRead,
)
from ..services.live_sync import LiveSyncAdapter
from ..services.sessions import Identity, PrincipalSession
from ..services.slots import CourtConfig, reservations_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("/quote", response_model=QuoteResponse)
def quote_reservation(
    data: QuoteRequest,
    _: Identity = Depends(get_identity),
    ctx: AppContext = Depends(get_ctx),
):
    quote = ctx.engine.quote(data.slots)
    return QuoteResponse(
        blocks=quote.blocks,
        price_per_block=quote.price_per_block,
        total=quote.total,
        currency=quote.currency,
    )


@router.post("", response_model=ReservationCommitResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    data: ReservationCreate,
    session: PrincipalSession = Depends(get_session),
    ctx: AppContext = Depends(get_ctx),
):
    created = await ctx.engine.commit_reservation(
        data.date,
        data.slots,
        session.identity,
        data.payment_method,
    )

    payment_status = created[0].payment_status
    method = data.payment_method.value
    total = ctx.engine.quote(r.slot for r in created).total

    return ReservationCommitResponse(
        message=f"Reservation confirmed! Payment ({method}) {payment_status.value}.",
        payment_method=data.payment_method,
        payment_status=payment_status,
        total=total,
        reservations=created,
    )


@router.get("/mine", response_model=list[ReservationRead])
async def list_my_reservations(
    day: date = Query(..., alias="date"),
    identity: Identity = Depends(get_identity),
    ctx: AppContext = Depends(get_ctx),
):
    reservations = await asyncio.to_thread(ctx.reservations.for_date, day)
    return reservations_of(reservations, identity.identity_id)


@router.delete("/{reservation_id}", response_model=CancelResponse)
async def cancel_reservation(
    reservation_id: int,
    session: PrincipalSession = Depends(get_session),
    ctx: AppContext = Depends(get_ctx),
):
    removed = await ctx.cancellation.cancel(
        reservation_id,
        session.identity.identity_id,
        session.role,
    )
    return CancelResponse(message="Reservation cancelled.", reservation=removed)


async def day_view_events(
    live_sync: LiveSyncAdapter,
    session: PrincipalSession,
    court: CourtConfig,
    day: date,
) -> AsyncGenerator[dict[str, str], None]:
    """One SSE "snapshot" event per refresh, rendered for the session's role."""
    async for snap in live_sync.stream(day):
        view = session.render(snap, court)
        yield {
            "event": "snapshot",
            "id": str(snap.version),
            "data": view.model_dump_json(),
        }


@router.get("/stream")
async def stream_day(
    day: date = Query(..., alias="date"),
    session: PrincipalSession = Depends(get_session),
    ctx: AppContext = Depends(get_ctx),
) -> EventSourceResponse:
    logger.info(f"Live view of {day} opened by {session.identity.identity_id} ({session.role.value})")

    return EventSourceResponse(
        day_view_events(ctx.live_sync, session, ctx.court, day),
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
