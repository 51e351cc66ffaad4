# backend/courtbook/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .context import AppContext, build_context
from .dependencies import get_ctx, get_session
from .middleware.identity import identity_middleware
from .routers import admin, reservations, slots, user_roles
from .schemas.user_roles import MeRead
from .services.reservations import BookingError
from .services.sessions import PrincipalSession

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Defaults to get_settings()
        context: Prebuilt context (tests); closed by the caller, not on shutdown
    """
    settings = settings or (context.settings if context else get_settings())

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            app.state.ctx = context
            yield
            return

        ctx = build_context(settings)
        app.state.ctx = ctx
        try:
            yield
        finally:
            await ctx.aclose()

    app = FastAPI(title="Court Booking API", lifespan=lifespan)

    if context is not None:
        # Available without entering the lifespan (TestClient used without `with`)
        app.state.ctx = context

    app.middleware("http")(identity_middleware)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        http_exc = exc.to_http_exception()
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.get("/health")
    def health(request: Request):
        ctx = get_ctx(request)
        return {"status": "ok", "change_feed": ctx.feed.kind}

    @app.get("/me", response_model=MeRead)
    def me(session: PrincipalSession = Depends(get_session)):
        return MeRead(
            identity_id=session.identity.identity_id,
            email=session.identity.email,
            role=session.role,
        )

    app.include_router(slots.router)
    app.include_router(reservations.router)
    app.include_router(admin.router)
    app.include_router(user_roles.router)

    return app


app = create_app()
