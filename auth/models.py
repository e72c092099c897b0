"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container). Mirrors jobs/models.py --
dataclasses own domain shape; stores and policy functions do the work.

Identity is a tagged variant rather than one class with optional fields:
  AdminIdentity -- the superuser pair (user_id=None) or a stored admin User.
  UserIdentity  -- a stored non-admin User; user_id is always present.
Callers branch on the type (or on .role), never on whether an id happens
to be set.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

ROLE_ADMIN = "admin"
ROLE_USER = "user"

# Literal written to Job.posted_by when the poster has no user record.
ADMIN_MARKER = "admin"


@dataclass
class User:
    """A registered account.

    password_hash is a bcrypt digest. It is never serialized into an API
    response; api/models.UserResponse deliberately has no field for it.

    id is None before the record is written to the database.
    """

    name: str
    email: str
    password_hash: str
    is_admin: bool = False
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class AdminIdentity:
    user_id: Optional[int] = None
    role: Literal["admin"] = ROLE_ADMIN

    @property
    def is_admin(self) -> bool:
        return True


@dataclass(frozen=True)
class UserIdentity:
    user_id: int
    role: Literal["user"] = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return False


Identity = Union[AdminIdentity, UserIdentity]


def identity_for(user: User) -> Identity:
    """Derive the role-bearing identity for a stored User."""
    if user.is_admin:
        return AdminIdentity(user_id=user.id)
    return UserIdentity(user_id=user.id)
