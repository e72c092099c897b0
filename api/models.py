"""
API request and response models for the job board REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
jobs/models.py, which own the internal domain representation. Route handlers
map between the two.

Wire format is camelCase (workType, expiresAt, isAdmin, ...). The alias
generator maps it onto snake_case attributes; populate_by_name lets tests and
internal callers use either spelling.

Request models for the auth routes leave every field optional: emptiness is
a policy decision (AllFieldsRequired, MissingCredentials, MissingFields) so it
must reach auth/policy.py rather than fail here with a 422. Nothing is
whitespace-stripped -- emails match exactly as stored and passwords are
opaque.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import User
from jobs.models import Job, JobDraft, JobView

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Auth -- requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    model_config = _CAMEL

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    model_config = _CAMEL

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


class ResetPasswordRequest(BaseModel):
    """Request body for POST /reset-password."""

    model_config = _CAMEL

    email: Optional[str] = Field(default=None, max_length=255)
    new_password: Optional[str] = Field(default=None, max_length=255)


class ChangePasswordRequest(BaseModel):
    """Request body for POST /change-password."""

    model_config = _CAMEL

    old_password: Optional[str] = Field(default=None, max_length=255)
    new_password: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Auth -- responses
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a User. There is no password field on purpose."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    name: str
    email: str
    is_admin: bool
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            created_at=user.created_at or "",
        )


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    """Response for POST /login. user is absent for the superuser."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    role: str
    user: Optional[UserResponse] = None


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    user: Optional[UserResponse] = None


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class JobCreate(BaseModel):
    """Request body for POST /jobs.

    skills accepts either a JSON array or a comma-separated string.
    expiresInHours takes precedence over expiresAt when both are sent.
    """

    model_config = _CAMEL

    position: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    work_type: Optional[str] = Field(default=None, max_length=50)
    expected_year: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=10000)
    vacancies: Optional[int] = Field(default=None, ge=0)
    salary: Optional[str] = Field(default=None, max_length=100)
    skills: Union[list[str], str, None] = None
    education: Optional[str] = Field(default=None, max_length=255)
    expires_in_hours: Optional[float] = None
    expires_at: Optional[datetime] = None

    def to_draft(self) -> JobDraft:
        return JobDraft(**self.model_dump())


class JobResponse(BaseModel):
    """One job as returned by the API. isExpired is present on list reads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    position: str
    company: str
    location: Optional[str]
    work_type: Optional[str]
    expected_year: Optional[str]
    description: Optional[str]
    vacancies: Optional[int]
    salary: Optional[str]
    skills: list[str]
    education: Optional[str]
    posted_time: datetime
    expires_at: Optional[datetime]
    posted_by: str
    is_expired: Optional[bool] = None

    @classmethod
    def from_job(cls, job: Job, is_expired: Optional[bool] = None) -> "JobResponse":
        return cls(
            id=job.id,
            position=job.position,
            company=job.company,
            location=job.location,
            work_type=job.work_type,
            expected_year=job.expected_year,
            description=job.description,
            vacancies=job.vacancies,
            salary=job.salary,
            skills=job.skills,
            education=job.education,
            posted_time=job.posted_time,
            expires_at=job.expires_at,
            posted_by=job.posted_by,
            is_expired=is_expired,
        )

    @classmethod
    def from_view(cls, view: JobView) -> "JobResponse":
        return cls.from_job(view.job, is_expired=view.is_expired)


class JobCreatedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    job: JobResponse
