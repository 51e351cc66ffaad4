# backend/courtbook/dependencies.py

from fastapi import Depends, HTTPException, Request, status

from .context import AppContext
from .services.sessions import AdminSession, Identity, PrincipalSession, open_session


def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx


def get_identity(request: Request) -> Identity:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing identity",
        )
    return identity


def get_session(
    identity: Identity = Depends(get_identity),
    ctx: AppContext = Depends(get_ctx),
) -> PrincipalSession:
    return open_session(identity, ctx.roles)


def require_admin(session: PrincipalSession = Depends(get_session)) -> AdminSession:
    if not isinstance(session, AdminSession):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return session
