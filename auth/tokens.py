"""
auth/tokens.py -- JWT issue / verify for request identities.

Security design decisions:
  python-jose with HS256. A token carries the identity's role, the user id
  for identities backed by a User record, and an absolute expiry:

      {"role": "admin" | "user", "id": "<user id>" (optional), "exp": <ts>}

  The codec is stateless: there is no server-side session or revocation list.
  A token is valid exactly until its exp.

  verify_token() never fails open. Any problem -- bad signature, malformed
  structure, unknown role, a user token without a numeric id, expiry in the
  past -- raises InvalidToken. No partially decoded identity is ever returned.

  SECRET_KEY comes from core.config.get_settings(), a process-wide read-only
  singleton. Its compiled-in default is insecure; see core/config.py.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from auth.models import ROLE_ADMIN, ROLE_USER, AdminIdentity, Identity, UserIdentity
from core.config import get_settings
from core.errors import InvalidToken

_ALGORITHM = "HS256"


def issue_token(identity: Identity, ttl: Optional[timedelta] = None) -> str:
    """Encode a signed JWT for the identity, expiring at now + ttl.

    Args:
        identity: The identity to embed.
        ttl:      Token lifetime. Defaults to Settings.token_expire_seconds.
    """
    settings = get_settings()
    if ttl is None:
        ttl = timedelta(seconds=settings.token_expire_seconds)
    payload: dict = {
        "role": identity.role,
        "exp": datetime.now(timezone.utc) + ttl,
    }
    if identity.user_id is not None:
        payload["id"] = str(identity.user_id)
    return jwt.encode(payload, settings.secret_key, algorithm=_ALGORITHM)


def verify_token(token: str) -> Identity:
    """Decode and verify a JWT, returning the identity it encodes.

    python-jose rejects the token when the signature does not match or when
    the current time is past exp.
    """
    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise InvalidToken() from exc
    if "exp" not in payload:
        raise InvalidToken()

    role = payload.get("role")
    raw_id = payload.get("id")
    try:
        user_id = int(raw_id) if raw_id is not None else None
    except (TypeError, ValueError) as exc:
        raise InvalidToken() from exc

    if role == ROLE_ADMIN:
        return AdminIdentity(user_id=user_id)
    if role == ROLE_USER and user_id is not None:
        return UserIdentity(user_id=user_id)
    raise InvalidToken()
