"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

One auth method: the ``Authorization: Bearer <token>`` header. The policy
function auth.policy.authenticate() does the parsing and verification; these
helpers only pull the header off the request.

get_identity()  -- raises NoToken / BadFormat / InvalidToken (401).
require_admin() -- wraps get_identity() and raises Forbidden (403) for a
                   non-admin identity.

Both raise core.errors failures, which api/main.py turns into the standard
error envelope.

Layer rule: auth/dependencies.py may import from fastapi because this module
is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import Identity
from auth.policy import authenticate
from core.errors import Forbidden


def get_identity(request: Request) -> Identity:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(identity: Identity = Depends(get_identity)): ...
    """
    return authenticate(request.headers.get("Authorization"))


def require_admin(request: Request) -> Identity:
    """Require an admin identity. 401 if unauthenticated, 403 if not admin."""
    identity = get_identity(request)
    if not identity.is_admin:
        raise Forbidden()
    return identity
