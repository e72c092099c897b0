"""
api/routes/jobs.py -- Job posting REST endpoints.

Routes:
  POST   /jobs            -- create a posting (admin)
  GET    /jobs            -- list postings, newest first, with isExpired (public)
  DELETE /jobs/{job_id}   -- delete a posting (admin)

isExpired is computed by jobs.policy.list_jobs() on every request; it is not
a stored column.
"""

from fastapi import APIRouter, Depends, Request

from api.models import JobCreate, JobCreatedResponse, JobResponse, MessageResponse
from auth.dependencies import require_admin
from auth.models import Identity
from jobs import policy
from jobs.store import JobStore

# Auth policy:
# - POST   /jobs:       requires admin (require_admin)
# - GET    /jobs:       public
# - DELETE /jobs/{id}:  requires admin (require_admin)
router = APIRouter()


@router.post("/jobs", response_model=JobCreatedResponse, status_code=201)
def create_job(
    request: Request,
    body: JobCreate,
    identity: Identity = Depends(require_admin),
) -> JobCreatedResponse:
    """Post a job. Rejected with 409 while an identical position/company is active."""
    job_store: JobStore = request.app.state.job_store
    job = policy.post_job(job_store, identity, body.to_draft())
    return JobCreatedResponse(
        message="Job posted successfully!",
        job=JobResponse.from_job(job, is_expired=policy.is_expired(job, job.posted_time)),
    )


@router.get("/jobs", response_model=list[JobResponse])
def list_jobs(request: Request) -> list[JobResponse]:
    job_store: JobStore = request.app.state.job_store
    return [JobResponse.from_view(view) for view in policy.list_jobs(job_store)]


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
def delete_job(
    request: Request,
    job_id: int,
    identity: Identity = Depends(require_admin),
) -> MessageResponse:
    job_store: JobStore = request.app.state.job_store
    policy.delete_job(job_store, identity, job_id)
    return MessageResponse(message="Job deleted successfully")
