"""
auth/policy.py -- Credentials in, role-bearing identities out.

Every function takes the UserStore as its first argument (same convention as
jobs/policy.py) and either returns a value or raises one core.errors failure.
Nothing here knows about HTTP; api/routes/auth.py maps results to responses.

Identity derivation:
  superuser pair          -> AdminIdentity(user_id=None), no store access
  stored User, is_admin   -> AdminIdentity(user_id=user.id)
  stored User, otherwise  -> UserIdentity(user_id=user.id)

Request auth state is never held between requests: authenticate() re-derives
the identity from the bearer token on every call.

Known weakness, kept deliberately:
  reset_password() asks for no proof of ownership (no old password, no emailed
  token). Anyone who knows an account's email can overwrite its password. The
  endpoint shape is preserved as is; every use is logged at WARNING.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from auth.models import AdminIdentity, Identity, User, identity_for
from auth.passwords import hash_password, verify_password
from auth.store import UserStore
from auth.tokens import issue_token, verify_token
from core.config import get_settings
from core.errors import (
    AllFieldsRequired,
    BadFormat,
    EmailTaken,
    InvalidPassword,
    MissingCredentials,
    MissingFields,
    NoToken,
    OldPasswordMismatch,
    Unauthorized,
    UserNotFound,
)

logger = logging.getLogger("jobboard.auth")

_BEARER_SCHEME = "Bearer"


@dataclass
class LoginResult:
    token: str
    role: str
    user: Optional[User] = None


@dataclass
class SelfView:
    role: str
    user: Optional[User] = None


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def register(store: UserStore, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
    """Create a non-admin User. The raw password is hashed and then dropped."""
    missing = [field for field, value in (("name", name), ("email", email), ("password", password)) if not value]
    if missing:
        raise AllFieldsRequired(detail=", ".join(missing))

    # The superuser email is reserved even though it has no stored record.
    if email == get_settings().superuser_email or store.find_by_email(email) is not None:
        raise EmailTaken()

    user = User(name=name, email=email, password_hash=hash_password(password), is_admin=False)
    user.id = store.insert(user)
    logger.info("Registered user id=%s", user.id)
    created = store.find_by_id(user.id)
    return created if created is not None else user


def _is_superuser(email: str, password: str) -> bool:
    settings = get_settings()
    email_ok = hmac.compare_digest(email.encode("utf-8"), settings.superuser_email.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.superuser_password.encode("utf-8"))
    return email_ok and password_ok


def login(store: UserStore, email: Optional[str], password: Optional[str]) -> LoginResult:
    """Exchange an email/password pair for a signed token.

    The superuser pair is checked first and never touches the store.
    """
    if not email or not password:
        raise MissingCredentials()

    if _is_superuser(email, password):
        identity = AdminIdentity()
        logger.info("Superuser login")
        return LoginResult(token=issue_token(identity), role=identity.role)

    user = store.find_by_email(email)
    if user is None:
        raise UserNotFound()
    if not verify_password(password, user.password_hash):
        logger.info("Rejected login for user id=%s: bad password", user.id)
        raise InvalidPassword()

    identity = identity_for(user)
    logger.info("Login user id=%s role=%s", user.id, identity.role)
    return LoginResult(token=issue_token(identity), role=identity.role, user=user)


def reset_password(store: UserStore, email: Optional[str], new_password: Optional[str]) -> None:
    """Overwrite the password of the account registered under email.

    Unauthenticated: see the module docstring.
    """
    missing = [field for field, value in (("email", email), ("newPassword", new_password)) if not value]
    if missing:
        raise MissingFields(detail=", ".join(missing))

    user = store.find_by_email(email)
    if user is None:
        raise UserNotFound()
    store.update_password_hash(user.id, hash_password(new_password))
    logger.warning("Unauthenticated password reset applied to user id=%s", user.id)


def change_password(
    store: UserStore,
    identity: Identity,
    old_password: Optional[str],
    new_password: Optional[str],
) -> None:
    """Overwrite the caller's own password after checking the old one."""
    missing = [field for field, value in (("oldPassword", old_password), ("newPassword", new_password)) if not value]
    if missing:
        raise MissingFields(detail=", ".join(missing))
    if identity.user_id is None:
        raise Unauthorized()

    user = store.find_by_id(identity.user_id)
    if user is None:
        raise UserNotFound()
    if not verify_password(old_password, user.password_hash):
        raise OldPasswordMismatch()
    store.update_password_hash(user.id, hash_password(new_password))
    logger.info("Password changed for user id=%s", user.id)


# ---------------------------------------------------------------------------
# Request identity
# ---------------------------------------------------------------------------


def authenticate(header: Optional[str]) -> Identity:
    """Resolve an ``Authorization`` header value to an Identity.

    Only the exact shape ``Bearer <token>`` is accepted: one space, a
    non-empty token, nothing after it. Token validity is up to verify_token().
    """
    if not header:
        raise NoToken()
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != _BEARER_SCHEME or not parts[1]:
        raise BadFormat()
    return verify_token(parts[1])


def resolve_self(store: UserStore, identity: Identity) -> SelfView:
    """Return the caller's role and a freshly fetched profile when one exists."""
    if identity.user_id is None:
        return SelfView(role=identity.role)
    user = store.find_by_id(identity.user_id)
    if user is None:
        raise UserNotFound()
    return SelfView(role=identity.role, user=user)
