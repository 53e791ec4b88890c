"""
api/routes/v1/auth.py -- Account signup and token endpoints.

Routes:
  POST /api/v1/auth/signup   -- create an account; returns the user plus a token
  POST /api/v1/auth/login    -- exchange email/password for a fresh token
  GET  /api/v1/auth/me       -- identity carried by the caller's token (requires auth)

Signup order of checks: emptiness -> email uniqueness -> hash -> insert ->
issue token. A rejected check returns before anything is written.

Security:
  authenticate_user() provides timing equalization -- use it, never inline.
  Cache-Control: no-store on every response that carries a token.
  The stored password hash is never part of a response model.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
)
from auth.dependencies import RequestContext, require_auth
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService, authenticate_user, hash_password
from core.errors import DuplicateEmail, EmptyField

logger = logging.getLogger("registry.api")

# Auth policy:
# - POST /api/v1/auth/signup: public -- account creation
# - POST /api/v1/auth/login:  public -- token issuance
# - GET  /api/v1/auth/me:     requires auth (require_auth)
router = APIRouter()


@router.post("/auth/signup", response_model=SignupResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register a new account and return it with a bearer token.

    Raises EmptyField if any field is blank after trimming and DuplicateEmail
    if the email is already registered.
    """
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.token_service

    if not body.username or not body.email or not body.password.strip():
        raise EmptyField()
    if user_store.get_by_email(body.email) is not None:
        logger.info("Signup rejected: email already registered")
        raise DuplicateEmail()

    user_id = user_store.create_user(
        User(
            username=body.username,
            email=body.email,
            hashed_password=hash_password(body.password),
        )
    )
    token = tokens.issue_token(user_id, body.email)
    logger.info("User %s signed up", user_id)

    resp = JSONResponse(
        status_code=201,
        content=SignupResponse(
            id=user_id,
            username=body.username,
            email=body.email,
            token=token,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a fresh bearer token.

    Returns the same generic error for an unknown email and a wrong password
    so the response does not reveal which emails are registered.
    """
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.token_service

    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.warning("Login failed from %s", request.client.host if request.client else "unknown")
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(
                error=ErrorDetail(code="bad_credentials", message="Invalid email or password.")
            ).model_dump(),
            headers={"WWW-Authenticate": "Bearer"},
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            access_token=tokens.issue_token(user.id, user.email),
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=tokens.expire_seconds,
            user=UserResponse(id=user.id, username=user.username, email=user.email),
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/auth/me", response_model=MeResponse)
def me(ctx: RequestContext = Depends(require_auth)) -> MeResponse:
    """Return the identity carried by the caller's verified token."""
    return MeResponse(
        user_id=ctx.claims.user_id,
        email=ctx.claims.email,
        expires_at=ctx.claims.expires_at.isoformat(),
    )
