"""
core/errors.py -- Typed failures shared by the policy layer and the API.

Every policy operation either returns a value or raises exactly one
JobBoardError subclass. Each class carries the HTTP status and the
machine-readable code the API layer puts in the error envelope, so route
handlers never map exceptions by hand.

Families:
  ValidationError  400  missing or malformed input
  AuthError        401  identity not established (403 for Forbidden)
  NotFoundError    404  user or job absent
  ConflictError    409  email taken, active duplicate job
  StoreError       500  collaborator (database) failure

Layer rule: core/ is the kernel. No imports from api/, auth/ or jobs/.
"""

from __future__ import annotations

from typing import Optional


class JobBoardError(Exception):
    """Base class for all caller-visible failures."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# 400
# ---------------------------------------------------------------------------


class ValidationError(JobBoardError):
    status_code = 400
    code = "validation_error"
    message = "Request validation failed."


class AllFieldsRequired(ValidationError):
    code = "all_fields_required"
    message = "All fields are required."


class MissingCredentials(ValidationError):
    code = "missing_credentials"
    message = "Please provide both email and password."


class MissingFields(ValidationError):
    code = "missing_fields"
    message = "Required fields are missing."


class InvalidPassword(ValidationError):
    code = "invalid_credentials"
    message = "Invalid credentials."


class OldPasswordMismatch(ValidationError):
    code = "old_password_mismatch"
    message = "Old password is incorrect."


# ---------------------------------------------------------------------------
# 401 / 403
# ---------------------------------------------------------------------------


class AuthError(JobBoardError):
    status_code = 401
    code = "unauthorized"
    message = "Authentication required."


class NoToken(AuthError):
    code = "no_token"
    message = "No token provided."


class BadFormat(AuthError):
    code = "bad_token_format"
    message = "Authorization header must be 'Bearer <token>'."


class InvalidToken(AuthError):
    code = "invalid_token"
    message = "Token is invalid or expired."


class Unauthorized(AuthError):
    code = "unauthorized"
    message = "This operation requires a registered user account."


class Forbidden(AuthError):
    status_code = 403
    code = "forbidden"
    message = "Admin access required."


# ---------------------------------------------------------------------------
# 404
# ---------------------------------------------------------------------------


class NotFoundError(JobBoardError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class UserNotFound(NotFoundError):
    code = "user_not_found"
    message = "User not found."


class JobNotFound(NotFoundError):
    code = "job_not_found"
    message = "Job not found."


# ---------------------------------------------------------------------------
# 409
# ---------------------------------------------------------------------------


class ConflictError(JobBoardError):
    status_code = 409
    code = "conflict"
    message = "Resource already exists."


class EmailTaken(ConflictError):
    code = "email_taken"
    message = "Email already registered."


class DuplicateActive(ConflictError):
    code = "duplicate_active_job"
    message = "An active job with this position and company already exists."


# ---------------------------------------------------------------------------
# 500
# ---------------------------------------------------------------------------


class StoreError(JobBoardError):
    status_code = 500
    code = "store_error"
    message = "The data store failed to complete the request."
