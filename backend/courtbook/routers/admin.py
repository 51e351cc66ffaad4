# backend/courtbook/routers/admin.py
"""
Admin views: every reservation of a day and its revenue.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..dependencies import get_ctx, require_admin
from ..schemas.slots import AdminDayView, RevenueRead
from ..services.sessions import AdminSession, revenue_read

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/reservations", response_model=AdminDayView)
async def list_day_reservations(
    day: date = Query(..., alias="date"),
    session: AdminSession = Depends(require_admin),
    ctx: AppContext = Depends(get_ctx),
):
    snap = await ctx.live_sync.snapshot(day)
    return session.render(snap, ctx.court)


@router.get("/revenue", response_model=RevenueRead)
async def get_day_revenue(
    day: date = Query(..., alias="date"),
    _: AdminSession = Depends(require_admin),
    ctx: AppContext = Depends(get_ctx),
):
    snap = await ctx.live_sync.snapshot(day)
    return revenue_read(snap, ctx.court)
