"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Every request gets a typed RequestContext built from the raw Authorization
header. Protected routes depend on require_auth(), which runs the bearer
check through the app's TokenService and records the verified claims on the
context. Because FastAPI resolves dependencies before the handler body runs,
a failed check aborts the request before any store is touched.

get_request_context() is the soft variant (never raises).
require_auth() raises MissingHeader / MalformedScheme / InvalidOrExpiredToken.

Layer rule: no imports from api/ or employees/.
  auth/dependencies.py may import from fastapi because this module is part
  of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from auth.models import TokenClaims
from auth.tokens import TokenService
from core.errors import AuthError

logger = logging.getLogger("registry.auth")


@dataclass
class RequestContext:
    """What a handler may know about the caller.

    authorization is the raw header value (None when absent). claims is None
    until require_auth() has verified the token.
    """

    authorization: str | None
    client_host: str | None = None
    claims: TokenClaims | None = None


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_request_context(request: Request) -> RequestContext:
    """Build the request context. Never raises."""
    return RequestContext(
        authorization=request.headers.get("Authorization"),
        client_host=request.client.host if request.client else None,
    )


def require_auth(
    context: RequestContext = Depends(get_request_context),
    tokens: TokenService = Depends(get_token_service),
) -> RequestContext:
    """Require a valid bearer token. Returns the context with claims filled in.

    Use as a FastAPI dependency:
        @router.post("/protected")
        def route(ctx: RequestContext = Depends(require_auth)): ...
    """
    try:
        context.claims = tokens.verify_token(context.authorization)
    except AuthError as exc:
        logger.warning("Auth rejected (%s) from %s", exc.code, context.client_host or "unknown")
        raise
    return context
