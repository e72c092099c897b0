"""
api/routes/auth.py -- Account and identity REST endpoints.

Routes:
  POST /register          -- create a non-admin user (public)
  POST /login             -- exchange email/password for a bearer token (public, rate limited)
  POST /reset-password    -- overwrite a password by email (public, see note)
  POST /change-password   -- overwrite own password after old-password check (bearer)
  GET  /me                -- current role and profile (bearer)

Handlers are thin: they pull the stores off app.state, call auth.policy, and
wrap the result in an api.models response. Failures are core.errors
exceptions, rendered by the handlers in api/main.py.

Security:
  POST /login is rate-limited per client IP (Settings.login_rate_limit).
  Cache-Control: no-store on login responses so tokens are never cached.
  POST /reset-password asks for no proof of ownership. The shape is kept as
  is; see auth/policy.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter, login_rate_limit
from api.models import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UserResponse,
)
from auth import policy
from auth.dependencies import get_identity
from auth.models import Identity
from auth.store import UserStore

# Auth policy:
# - POST /register:         public
# - POST /login:            public -- login endpoint must be unauthenticated
# - POST /reset-password:   public -- no proof of ownership, logged at WARNING
# - POST /change-password:  requires bearer token with a backing user record
# - GET  /me:               requires bearer token (get_identity)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Create an account. Registration never grants admin rights."""
    user_store: UserStore = request.app.state.user_store
    user = policy.register(user_store, body.name, body.email, body.password)
    return RegisterResponse(message="User registered successfully!", user=UserResponse.from_user(user))


@limiter.limit(login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password.

    The superuser pair returns role "admin" and no user object.
    """
    user_store: UserStore = request.app.state.user_store
    result = policy.login(user_store, body.email, body.password)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            message="Login successful!",
            token=result.token,
            role=result.role,
            user=UserResponse.from_user(result.user) if result.user is not None else None,
        ).model_dump(mode="json", by_alias=True, exclude_none=True),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(request: Request, body: ResetPasswordRequest) -> MessageResponse:
    """Overwrite the password for the account registered under body.email."""
    user_store: UserStore = request.app.state.user_store
    policy.reset_password(user_store, body.email, body.new_password)
    return MessageResponse(message="Password reset successful")


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    identity: Identity = Depends(get_identity),
) -> MessageResponse:
    """Change the caller's own password. The superuser has no record to change."""
    user_store: UserStore = request.app.state.user_store
    policy.change_password(user_store, identity, body.old_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/me", response_model=MeResponse, response_model_exclude_none=True)
def me(request: Request, identity: Identity = Depends(get_identity)) -> MeResponse:
    """Return the caller's role and, for user-backed identities, a fresh profile."""
    user_store: UserStore = request.app.state.user_store
    view = policy.resolve_self(user_store, identity)
    return MeResponse(
        role=view.role,
        user=UserResponse.from_user(view.user) if view.user is not None else None,
    )
