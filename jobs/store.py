"""
jobs/store.py -- SQLAlchemy Core persistence layer for job postings.

Pattern: Repository + Data Mapper (same as auth/store.py). JobStore is the
repository; _row_to_job is the mapper. Policy code never touches SQL.

Timestamps are stored with core.db.to_db_timestamp(), a fixed-width UTC
ISO-8601 string, so the active-only filter in find_matching() and the
newest-first ordering in list_all() are plain string comparisons in SQL.

skills is a JSON array serialized as text.

There is no UNIQUE constraint on (position, company): whether a posting is
active depends on the current time, which a static constraint cannot express.
See jobs/policy.py for the resulting check-then-insert race.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = JobStore()                                # SQLite default
    store = JobStore("postgresql://user:pw@host/db")  # PostgreSQL
    job_id = store.insert(job)
    jobs = store.list_all()
    store.delete_by_id(job_id)
    store.close()
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, or_
from sqlalchemy.engine import Engine

from core.config import get_settings
from core.db import from_db_timestamp, make_engine, store_errors, to_db_timestamp
from jobs.models import Job

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_jobs = Table(
    "jobs",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("position", String(255), nullable=False, index=True),
    Column("company", String(255), nullable=False, index=True),
    Column("location", String(255)),
    Column("work_type", String(50)),
    Column("expected_year", String(50)),
    Column("description", Text),
    Column("vacancies", Integer),
    Column("salary", String(100)),
    Column("skills", Text),  # JSON array serialized as text
    Column("education", String(255)),
    Column("posted_time", String(32), nullable=False),
    Column("expires_at", String(32)),  # NULL = never expires
    Column("posted_by", String(64), nullable=False, server_default="admin"),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class JobStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        with store_errors("create jobs schema"):
            _metadata.create_all(self.engine)

    def insert(self, job: Job) -> int:
        """Insert a job and return its assigned database ID."""
        with store_errors("insert job"), self.engine.connect() as conn:
            result = conn.execute(
                _jobs.insert().values(
                    position=job.position,
                    company=job.company,
                    location=job.location,
                    work_type=job.work_type,
                    expected_year=job.expected_year,
                    description=job.description,
                    vacancies=job.vacancies,
                    salary=job.salary,
                    skills=json.dumps(job.skills),
                    education=job.education,
                    posted_time=to_db_timestamp(job.posted_time),
                    expires_at=to_db_timestamp(job.expires_at) if job.expires_at is not None else None,
                    posted_by=job.posted_by,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def find_by_id(self, job_id: int) -> Optional[Job]:
        with store_errors("find job by id"), self.engine.connect() as conn:
            row = conn.execute(_jobs.select().where(_jobs.c.id == job_id)).fetchone()
        return _row_to_job(row) if row is not None else None

    def find_matching(self, position: str, company: str, active_at: Optional[datetime] = None) -> list[Job]:
        """Return jobs whose position and company match exactly.

        When active_at is given, only jobs that never expire or expire strictly
        after active_at are returned.
        """
        query = _jobs.select().where((_jobs.c.position == position) & (_jobs.c.company == company))
        if active_at is not None:
            query = query.where(or_(_jobs.c.expires_at.is_(None), _jobs.c.expires_at > to_db_timestamp(active_at)))
        with store_errors("find matching jobs"), self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_job(r) for r in rows]

    def list_all(self) -> list[Job]:
        """Return every job, newest posting first."""
        with store_errors("list jobs"), self.engine.connect() as conn:
            rows = conn.execute(_jobs.select().order_by(_jobs.c.posted_time.desc(), _jobs.c.id.desc())).fetchall()
        return [_row_to_job(r) for r in rows]

    def delete_by_id(self, job_id: int) -> bool:
        """Delete a job. Returns True if deleted, False if not found."""
        with store_errors("delete job"), self.engine.connect() as conn:
            result = conn.execute(_jobs.delete().where(_jobs.c.id == job_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_job(row) -> Job:
    return Job(
        id=row.id,
        position=row.position,
        company=row.company,
        location=row.location,
        work_type=row.work_type,
        expected_year=row.expected_year,
        description=row.description,
        vacancies=row.vacancies,
        salary=row.salary,
        skills=json.loads(row.skills) if row.skills else [],
        education=row.education,
        posted_time=from_db_timestamp(row.posted_time),
        expires_at=from_db_timestamp(row.expires_at),
        posted_by=row.posted_by,
    )
