# backend/courtbook/routers/slots.py
"""
Slots API endpoints.

GET /slots/day - Calendar of a day with the state of every slot for the caller
"""

import asyncio
from datetime import date

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..dependencies import get_ctx, get_identity
from ..schemas.slots import SlotsDayResponse
from ..services.sessions import Identity, slot_infos
from ..services.slots import SlotState
from ..services.slots.config import SLOT_STEP_MINUTES

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=SlotsDayResponse)
async def get_slots_day(
    day: date = Query(..., alias="date"),
    identity: Identity = Depends(get_identity),
    ctx: AppContext = Depends(get_ctx),
):
    reservations = await asyncio.to_thread(ctx.reservations.for_date, day)
    slots = slot_infos(ctx.court, reservations, identity.identity_id)

    return SlotsDayResponse(
        date=day,
        slots=slots,
        free_count=sum(1 for s in slots if s.state is SlotState.FREE),
        open_hour=ctx.court.open_hour,
        close_hour=ctx.court.close_hour,
        price_per_block=ctx.court.price_per_block,
        slot_step_minutes=SLOT_STEP_MINUTES,
    )
