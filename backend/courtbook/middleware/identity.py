# backend/courtbook/middleware/identity.py
"""
Identity middleware.

The trusted gateway authenticates the caller and forwards the result in
headers. This service never verifies credentials itself.
"""

from fastapi import Request

from ..services.sessions import Identity

IDENTITY_HEADER = "X-Identity-Id"
EMAIL_HEADER = "X-Identity-Email"

PUBLIC_PATHS = ("/health", "/docs", "/openapi.json")


async def identity_middleware(request: Request, call_next):
    request.state.identity = None

    if request.url.path in PUBLIC_PATHS:
        return await call_next(request)

    identity_id = (request.headers.get(IDENTITY_HEADER) or "").strip()
    if identity_id:
        email = (request.headers.get(EMAIL_HEADER) or "").strip() or None
        request.state.identity = Identity(identity_id=identity_id, email=email)

    return await call_next(request)
