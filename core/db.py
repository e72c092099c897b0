"""
core/db.py -- Shared SQLAlchemy plumbing for the auth and jobs stores.

Both stores use SQLAlchemy Core (not ORM) so the dataclasses in auth/models.py
and jobs/models.py stay the authoritative domain representation. The pieces
they have in common live here:

  make_engine()     -- engine factory; SQLite gets check_same_thread=False and
                       WAL mode on every pooled connection.
  store_errors()    -- translates SQLAlchemyError into core.errors.StoreError
                       so the API maps collaborator failures to a 500 without
                       leaking SQL or bound parameters.
  to_db_timestamp() -- fixed-width UTC ISO-8601 encoding. Every stored
  from_db_timestamp()  timestamp has the same shape, so SQL string comparison
                       is chronological comparison.

Layer rule: core/ is the kernel. No imports from api/, auth/ or jobs/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.errors import StoreError

logger = logging.getLogger("jobboard.db")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise database failures as StoreError.

    The original exception is chained (``raise ... from``) and logged with a
    traceback server-side; only the operation name reaches the client.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store operation failed: %s", operation)
        raise StoreError(f"Store operation failed: {operation}.") from exc


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db_timestamp(value: datetime) -> str:
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value))
