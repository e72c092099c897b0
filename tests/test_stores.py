"""Unit tests for auth/store.py and jobs/store.py.

Covers:
- UserStore insert / lookups / password update / UNIQUE(email)
- JobStore active-only matching, newest-first ordering, delete
- Database failures surface as StoreError, not raw SQLAlchemy exceptions
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from auth.models import User
from core.db import from_db_timestamp, to_db_timestamp
from core.errors import EmailTaken, StoreError
from jobs.models import Job

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _job(position: str = "Engineer", company: str = "Acme", **kwargs) -> Job:
    kwargs.setdefault("posted_time", NOW)
    return Job(position=position, company=company, **kwargs)


class TestUserStore:
    def test_insert_and_find(self, user_store) -> None:
        uid = user_store.insert(User(name="Ada", email="ada@example.com", password_hash="h"))
        by_email = user_store.find_by_email("ada@example.com")
        by_id = user_store.find_by_id(uid)
        assert by_email == by_id
        assert by_id.is_admin is False
        assert by_id.created_at

    def test_missing_user(self, user_store) -> None:
        assert user_store.find_by_email("nobody@example.com") is None
        assert user_store.find_by_id(99) is None

    def test_duplicate_email_raises_email_taken(self, user_store) -> None:
        user_store.insert(User(name="Ada", email="ada@example.com", password_hash="h"))
        with pytest.raises(EmailTaken):
            user_store.insert(User(name="Ada 2", email="ada@example.com", password_hash="h2"))
        assert user_store.count() == 1

    def test_update_password_hash(self, user_store) -> None:
        uid = user_store.insert(User(name="Ada", email="ada@example.com", password_hash="old"))
        assert user_store.update_password_hash(uid, "new") is True
        assert user_store.find_by_id(uid).password_hash == "new"
        assert user_store.update_password_hash(uid + 1, "x") is False

    def test_failure_becomes_store_error(self, user_store) -> None:
        with user_store.engine.begin() as conn:
            conn.execute(text("DROP TABLE users"))
        with pytest.raises(StoreError):
            user_store.find_by_email("ada@example.com")
        assert user_store.ping() is False


class TestJobStore:
    def test_round_trip(self, job_store) -> None:
        expires = NOW + timedelta(hours=3)
        jid = job_store.insert(_job(skills=["a", "b"], vacancies=2, expires_at=expires, posted_by="5"))
        job = job_store.find_by_id(jid)
        assert job.skills == ["a", "b"]
        assert job.vacancies == 2
        assert job.posted_time == NOW
        assert job.expires_at == expires
        assert job.posted_by == "5"

    def test_find_matching_active_only(self, job_store) -> None:
        job_store.insert(_job(expires_at=NOW - timedelta(minutes=1)))
        live = job_store.insert(_job(expires_at=NOW + timedelta(minutes=1)))
        forever = job_store.insert(_job())
        job_store.insert(_job(company="Other"))

        assert len(job_store.find_matching("Engineer", "Acme")) == 3
        active = {j.id for j in job_store.find_matching("Engineer", "Acme", active_at=NOW)}
        assert active == {live, forever}

    def test_list_all_newest_first_with_id_tiebreak(self, job_store) -> None:
        first = job_store.insert(_job(position="A"))
        second = job_store.insert(_job(position="B"))
        newest = job_store.insert(_job(position="C", posted_time=NOW + timedelta(seconds=1)))
        assert [j.id for j in job_store.list_all()] == [newest, second, first]

    def test_far_future_expiry_lists_back(self, job_store) -> None:
        expires = datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        jid = job_store.insert(_job(expires_at=expires))
        assert [(j.id, j.expires_at) for j in job_store.list_all()] == [(jid, expires)]
        assert [j.id for j in job_store.find_matching("Engineer", "Acme", active_at=NOW)] == [jid]

    def test_delete_by_id(self, job_store) -> None:
        jid = job_store.insert(_job())
        assert job_store.delete_by_id(jid) is True
        assert job_store.delete_by_id(jid) is False
        assert job_store.find_by_id(jid) is None

    def test_failure_becomes_store_error(self, job_store) -> None:
        with job_store.engine.begin() as conn:
            conn.execute(text("DROP TABLE jobs"))
        with pytest.raises(StoreError):
            job_store.list_all()


class TestTimestampCodec:
    def test_fixed_width_sorts_chronologically(self) -> None:
        whole = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        fraction = whole + timedelta(microseconds=1)
        assert len(to_db_timestamp(whole)) == len(to_db_timestamp(fraction))
        assert to_db_timestamp(whole) < to_db_timestamp(fraction)

    def test_other_offsets_normalised_to_utc(self) -> None:
        plus_two = datetime(2026, 1, 1, 2, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_db_timestamp(plus_two) == "2026-01-01T00:00:00.000000+00:00"
        assert from_db_timestamp(to_db_timestamp(plus_two)) == plus_two

    @pytest.mark.parametrize("year", [1000, 2026, 9999])
    def test_four_digit_years_keep_width_and_round_trip(self, year: int) -> None:
        value = datetime(year, 6, 1, 8, 30, tzinfo=timezone.utc)
        encoded = to_db_timestamp(value)
        assert len(encoded) == len("2026-01-01T00:00:00.000000+00:00")
        assert from_db_timestamp(encoded) == value

    def test_empty_is_none(self) -> None:
        assert from_db_timestamp(None) is None
