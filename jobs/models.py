"""
jobs/models.py -- Domain dataclasses for job postings.

Pure data containers with zero logic. Expiry, duplicate detection and the
read-time expired flag live in jobs/policy.py.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


@dataclass
class Job:
    """A job posting.

    expires_at None means the posting never expires. posted_by is the poster's
    user id as a string, or auth.models.ADMIN_MARKER for the superuser.

    id is None before the record is written to the database.
    """

    position: str
    company: str
    location: Optional[str] = None
    work_type: Optional[str] = None
    expected_year: Optional[str] = None
    description: Optional[str] = None
    vacancies: Optional[int] = None
    salary: Optional[str] = None
    skills: list[str] = field(default_factory=list)
    education: Optional[str] = None
    posted_time: Optional[datetime] = None  # set by policy on create
    expires_at: Optional[datetime] = None
    posted_by: str = "admin"
    id: Optional[int] = None


@dataclass
class JobDraft:
    """Caller-supplied fields for a new posting, before policy runs.

    skills may still be a comma-separated string. expires_in_hours and
    expires_at are the two ways to ask for an expiry; see
    jobs.policy.compute_expiry().
    """

    position: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    work_type: Optional[str] = None
    expected_year: Optional[str] = None
    description: Optional[str] = None
    vacancies: Optional[int] = None
    salary: Optional[str] = None
    skills: Union[list[str], str, None] = None
    education: Optional[str] = None
    expires_in_hours: Optional[float] = None
    expires_at: Union[datetime, str, None] = None


@dataclass
class JobView:
    """A Job as seen at one instant. is_expired is never persisted."""

    job: Job
    is_expired: bool
