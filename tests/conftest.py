"""
tests/conftest.py -- Shared test fixtures for the job board test suite.

This module provides:
  - user_store / job_store: fresh in-memory stores for unit tests
  - api_client: TestClient wired to isolated shared-memory stores, plus a
    superuser admin token
  - make_user: helper fixture that registers a user and returns (user, token)

Design: Named shared-memory SQLite URIs (not plain :memory:) are used for the
API client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process.

Environment variables must be set before any project import so
get_settings() builds the test configuration: a fixed SECRET_KEY, a low
bcrypt cost, and a login rate limit no test can hit.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set env before any auth/core import -- get_settings() is cached.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-job-board-suite-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOGIN_RATE_LIMIT", "10000/minute")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import AdminIdentity, User, identity_for
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import issue_token
from jobs.store import JobStore

SUPERUSER_EMAIL = "admin@jobportal.com"
SUPERUSER_PASSWORD = "admin123"


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


# ---------------------------------------------------------------------------
# Unit-test stores
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def job_store() -> Generator[JobStore, None, None]:
    store = JobStore("sqlite:///:memory:")
    yield store
    store.close()


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


def _patch_lifespan(user_store: UserStore, job_store: JobStore):
    """Return a lifespan that wires the pre-created test stores into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.job_store = job_store
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str], None, None]:
    """Yield (client, admin_token) for API integration tests.

    One pair of shared-memory stores per test module, named after the module
    so modules never see each other's rows. admin_token is a superuser token
    (admin role, no user id).
    """
    suffix = request.module.__name__.replace(".", "_")
    user_store = UserStore(f"sqlite:///file:test_users_{suffix}?mode=memory&cache=shared&uri=true")
    job_store = JobStore(f"sqlite:///file:test_jobs_{suffix}?mode=memory&cache=shared&uri=true")

    app.router.lifespan_context = _patch_lifespan(user_store, job_store)
    token = issue_token(AdminIdentity())

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token

    user_store.close()
    job_store.close()


@pytest.fixture
def make_user(api_client):
    """Factory: insert a user straight into the API's store and return (user, token)."""
    client, _ = api_client

    def _make(password: str = "pass1234", is_admin: bool = False) -> tuple[User, str]:
        store: UserStore = client.app.state.user_store
        user = User(
            name="Test User",
            email=unique_email("admin" if is_admin else "user"),
            password_hash=hash_password(password),
            is_admin=is_admin,
        )
        user.id = store.insert(user)
        return user, issue_token(identity_for(user))

    return _make


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
