"""
jobs/policy.py -- Job lifecycle rules: expiry, duplicate prevention, expired flag.

Every function takes the JobStore as its first argument and either returns a
value or raises one core.errors failure. Functions that depend on the clock
accept an optional ``now`` so callers (and tests) can pin the instant.

Definitions:
  active   -- expires_at is None, or expires_at > now
  expired  -- expires_at is not None, and now > expires_at

At the exact instant now == expires_at a posting is neither active nor
expired. is_expired is computed on every read and never written back, so the
flag flips at the expiry instant without any write.

Duplicate rule: a new posting is rejected while another posting with exactly
the same position and company (string equality, no case folding or trimming)
is active. Nothing else is de-duplicated.

Known race: is_duplicate_active() and JobStore.insert() are separate
statements. Two admin posts for the same position/company arriving at the same
moment can both pass the check and both be stored. The store has no
time-aware uniqueness constraint to close that window.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Union

from auth.models import ADMIN_MARKER, Identity
from core.db import ensure_utc, utc_now
from core.errors import DuplicateActive, Forbidden, JobNotFound, ValidationError
from jobs.models import Job, JobDraft, JobView
from jobs.store import JobStore

logger = logging.getLogger("jobboard.jobs")


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


# Stored timestamps sort as strings only while the year has four digits.
MIN_EXPIRY_YEAR = 1000


def _in_range(expiry: datetime, field: str) -> datetime:
    try:
        expiry = ensure_utc(expiry)
    except OverflowError as exc:
        raise ValidationError(f"{field} is out of range.") from exc
    if expiry.year < MIN_EXPIRY_YEAR:
        raise ValidationError(f"{field} is out of range.", detail=expiry.isoformat())
    return expiry


def compute_expiry(
    expires_in_hours: Optional[float] = None,
    expires_at: Union[datetime, str, None] = None,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """Return the absolute expiry for a new posting, or None for never.

    A finite expires_in_hours wins over expires_at. NaN and infinity count as
    "not supplied". Naive datetimes are taken to be UTC. An expiry that falls
    outside the representable range, or before year 1000, is a ValidationError.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    if (
        expires_in_hours is not None
        and not isinstance(expires_in_hours, bool)
        and isinstance(expires_in_hours, (int, float))
        and math.isfinite(expires_in_hours)
    ):
        try:
            return _in_range(now + timedelta(hours=expires_in_hours), "expiresInHours")
        except OverflowError as exc:
            raise ValidationError("expiresInHours is out of range.", detail=str(expires_in_hours)) from exc
    if expires_at is None or expires_at == "":
        return None
    if isinstance(expires_at, datetime):
        return _in_range(expires_at, "expiresAt")
    try:
        parsed = datetime.fromisoformat(expires_at.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as exc:
        raise ValidationError("expiresAt must be an ISO 8601 timestamp.", detail=str(expires_at)) from exc
    return _in_range(parsed, "expiresAt")


def split_skills(skills: Union[list[str], str, None]) -> list[str]:
    """Normalise the skills field to an ordered list.

    A list is kept as given. A string is split on commas; items are trimmed
    and empty items dropped.
    """
    if skills is None:
        return []
    if isinstance(skills, str):
        return [s.strip() for s in skills.split(",") if s.strip()]
    return list(skills)


def is_expired(job: Job, now: datetime) -> bool:
    return job.expires_at is not None and ensure_utc(now) > job.expires_at


def _posted_by(identity: Identity) -> str:
    return str(identity.user_id) if identity.user_id is not None else ADMIN_MARKER


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def is_duplicate_active(store: JobStore, position: str, company: str, now: Optional[datetime] = None) -> bool:
    """True iff an active job with exactly this position and company exists."""
    now = now if now is not None else utc_now()
    return bool(store.find_matching(position, company, active_at=now))


def post_job(store: JobStore, identity: Identity, draft: JobDraft, now: Optional[datetime] = None) -> Job:
    """Create a posting on behalf of an admin identity.

    Nothing is written unless every check passes.
    """
    if not identity.is_admin:
        raise Forbidden()

    missing = [field for field, value in (("position", draft.position), ("company", draft.company)) if not value]
    if missing:
        raise ValidationError("Position and company are required.", detail=", ".join(missing))

    now = ensure_utc(now) if now is not None else utc_now()
    expires_at = compute_expiry(draft.expires_in_hours, draft.expires_at, now=now)

    if is_duplicate_active(store, draft.position, draft.company, now=now):
        raise DuplicateActive()

    job = Job(
        position=draft.position,
        company=draft.company,
        location=draft.location,
        work_type=draft.work_type,
        expected_year=draft.expected_year,
        description=draft.description,
        vacancies=draft.vacancies,
        salary=draft.salary,
        skills=split_skills(draft.skills),
        education=draft.education,
        posted_time=now,
        expires_at=expires_at,
        posted_by=_posted_by(identity),
    )
    job.id = store.insert(job)
    logger.info("Job id=%s posted by %s (expires_at=%s)", job.id, job.posted_by, job.expires_at)
    return job


def list_jobs(store: JobStore, now: Optional[datetime] = None) -> list[JobView]:
    """Return every job, newest first, each flagged expired or not as of now."""
    now = now if now is not None else utc_now()
    return [JobView(job=job, is_expired=is_expired(job, now)) for job in store.list_all()]


def delete_job(store: JobStore, identity: Identity, job_id: int) -> None:
    if not identity.is_admin:
        raise Forbidden()
    if not store.delete_by_id(job_id):
        raise JobNotFound()
    logger.info("Job id=%s deleted by %s", job_id, _posted_by(identity))
