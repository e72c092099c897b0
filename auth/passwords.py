"""
auth/passwords.py -- Password hashing (bcrypt, direct usage, no passlib wrapper).

bcrypt generates a fresh salt per hash_password() call and embeds it in the
digest, so verify_password() needs nothing but the digest.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Passwords longer than 72 bytes are silently truncated by bcrypt (a known
    bcrypt limitation). The API caps password fields at 255 characters.
    """
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed or non-bcrypt digest
        return False
