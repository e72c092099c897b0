"""
auth/store.py -- SQLAlchemy Core persistence layer for User records.

Pattern: Repository + Data Mapper (same as jobs/store.py).
UserStore is the repository; _row_to_user is the mapper.
Policy and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  UNIQUE(email) backs up the check-before-insert in auth.policy.register():
  a concurrent duplicate insert fails here with EmailTaken.

  Every database failure surfaces as core.errors.StoreError (see
  core.db.store_errors) -- never as a raw SQLAlchemy exception.

Email matching is exact and case-sensitive, as stored.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.config import get_settings
from core.db import make_engine, store_errors, to_db_timestamp, utc_now
from core.errors import EmailTaken, StoreError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("is_admin", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        user_id = store.insert(User(name="Ada", email="ada@example.com", password_hash=hash_password("pw")))
        user = store.find_by_email("ada@example.com")
        store.close()
    """

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        with store_errors("create users schema"):
            _metadata.create_all(self.engine)

    def insert(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises EmailTaken if the UNIQUE(email) constraint fires -- the signal
        that a concurrent registration won the race past the policy check.
        """
        with store_errors("insert user"), self.engine.connect() as conn:
            try:
                result = conn.execute(
                    _users.insert().values(
                        name=user.name,
                        email=user.email,
                        password_hash=user.password_hash,
                        is_admin=1 if user.is_admin else 0,
                        created_at=to_db_timestamp(utc_now()),
                    )
                )
            except IntegrityError as exc:
                raise EmailTaken() from exc
            conn.commit()
            return result.inserted_primary_key[0]

    def find_by_email(self, email: str) -> Optional[User]:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with store_errors("find user by email"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Look up a user by primary key. Returns None if not found."""
        with store_errors("find user by id"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        """Overwrite the stored hash. Returns False if user_id was not found."""
        with store_errors("update password hash"), self.engine.connect() as conn:
            result = conn.execute(_users.update().where(_users.c.id == user_id).values(password_hash=password_hash))
            conn.commit()
        return result.rowcount > 0

    def count(self) -> int:
        with store_errors("count users"), self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by /health."""
        try:
            self.count()
        except StoreError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        is_admin=bool(row.is_admin),
        created_at=row.created_at,
    )
