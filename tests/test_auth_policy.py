"""Unit tests for auth/policy.py against an in-memory UserStore.

Covers:
- register(): required fields, email uniqueness, never an admin
- login(): superuser pair bypasses the store, user tokens, failure kinds
- reset_password() then login() with new and old passwords
- change_password(): old-password check, superuser has no record
- authenticate(): exact "Bearer <token>" shape
- resolve_self(): refreshed profile, superuser role only
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from auth import policy
from auth.models import AdminIdentity, User, UserIdentity
from auth.passwords import hash_password
from auth.tokens import issue_token, verify_token
from core.errors import (
    AllFieldsRequired,
    BadFormat,
    EmailTaken,
    InvalidPassword,
    InvalidToken,
    MissingCredentials,
    MissingFields,
    NoToken,
    OldPasswordMismatch,
    Unauthorized,
    UserNotFound,
)

SUPERUSER_EMAIL = "admin@jobportal.com"
SUPERUSER_PASSWORD = "admin123"


class TestRegister:
    def test_register_creates_non_admin_user(self, user_store) -> None:
        user = policy.register(user_store, "Ada", "ada@example.com", "hunter22")
        assert user.id is not None
        assert user.is_admin is False
        assert user.email == "ada@example.com"
        assert user.password_hash != "hunter22"
        assert user_store.count() == 1

    @pytest.mark.parametrize(
        "name,email,password",
        [("", "a@example.com", "pw"), ("Ada", "", "pw"), ("Ada", "a@example.com", ""), (None, None, None)],
    )
    def test_register_requires_all_fields(self, user_store, name, email, password) -> None:
        with pytest.raises(AllFieldsRequired):
            policy.register(user_store, name, email, password)
        assert user_store.count() == 0

    def test_superuser_email_is_reserved(self, user_store) -> None:
        with pytest.raises(EmailTaken):
            policy.register(user_store, "Impostor", SUPERUSER_EMAIL, "pw")
        assert user_store.count() == 0

    def test_second_registration_with_same_email_fails(self, user_store) -> None:
        policy.register(user_store, "Ada", "ada@example.com", "pw1")
        with pytest.raises(EmailTaken):
            policy.register(user_store, "Other Ada", "ada@example.com", "pw2")
        assert user_store.count() == 1

    def test_email_match_is_case_sensitive(self, user_store) -> None:
        policy.register(user_store, "Ada", "ada@example.com", "pw1")
        policy.register(user_store, "Ada", "ADA@example.com", "pw2")
        assert user_store.count() == 2


class TestLogin:
    def test_superuser_login_with_empty_store(self, user_store) -> None:
        result = policy.login(user_store, SUPERUSER_EMAIL, SUPERUSER_PASSWORD)
        assert result.role == "admin"
        assert result.user is None
        assert verify_token(result.token) == AdminIdentity(user_id=None)

    def test_superuser_login_never_touches_store(self) -> None:
        store = MagicMock()
        result = policy.login(store, SUPERUSER_EMAIL, SUPERUSER_PASSWORD)
        assert result.role == "admin"
        store.find_by_email.assert_not_called()

    def test_superuser_wins_even_if_a_stored_user_shares_the_email(self, user_store) -> None:
        user_store.insert(User(name="Impostor", email=SUPERUSER_EMAIL, password_hash=hash_password("other")))
        result = policy.login(user_store, SUPERUSER_EMAIL, SUPERUSER_PASSWORD)
        assert result.user is None
        assert verify_token(result.token).user_id is None

    def test_user_login_issues_user_token(self, user_store) -> None:
        user = policy.register(user_store, "Ada", "ada@example.com", "hunter22")
        result = policy.login(user_store, "ada@example.com", "hunter22")
        assert result.role == "user"
        assert result.user.id == user.id
        assert verify_token(result.token) == UserIdentity(user_id=user.id)

    def test_stored_admin_login_issues_admin_token_with_id(self, user_store) -> None:
        uid = user_store.insert(User(name="Boss", email="boss@example.com", password_hash=hash_password("pw"), is_admin=True))
        result = policy.login(user_store, "boss@example.com", "pw")
        assert result.role == "admin"
        assert verify_token(result.token) == AdminIdentity(user_id=uid)

    @pytest.mark.parametrize("email,password", [("", "pw"), ("a@example.com", ""), (None, None)])
    def test_missing_credentials(self, user_store, email, password) -> None:
        with pytest.raises(MissingCredentials):
            policy.login(user_store, email, password)

    def test_unknown_email(self, user_store) -> None:
        with pytest.raises(UserNotFound):
            policy.login(user_store, "nobody@example.com", "pw")

    def test_wrong_password(self, user_store) -> None:
        policy.register(user_store, "Ada", "ada@example.com", "hunter22")
        with pytest.raises(InvalidPassword):
            policy.login(user_store, "ada@example.com", "wrong")

    def test_superuser_password_alone_is_not_enough(self, user_store) -> None:
        with pytest.raises(UserNotFound):
            policy.login(user_store, "someone@example.com", SUPERUSER_PASSWORD)


class TestPasswordReset:
    def test_reset_then_login(self, user_store) -> None:
        policy.register(user_store, "Ada", "ada@example.com", "old-pass")
        policy.reset_password(user_store, "ada@example.com", "new-pass")

        assert policy.login(user_store, "ada@example.com", "new-pass").role == "user"
        with pytest.raises(InvalidPassword):
            policy.login(user_store, "ada@example.com", "old-pass")

    def test_reset_unknown_email(self, user_store) -> None:
        with pytest.raises(UserNotFound):
            policy.reset_password(user_store, "nobody@example.com", "x")

    @pytest.mark.parametrize("email,new_password", [("", "x"), ("a@example.com", ""), (None, None)])
    def test_reset_missing_fields(self, user_store, email, new_password) -> None:
        with pytest.raises(MissingFields):
            policy.reset_password(user_store, email, new_password)


class TestChangePassword:
    def test_change_password(self, user_store) -> None:
        user = policy.register(user_store, "Ada", "ada@example.com", "old-pass")
        policy.change_password(user_store, UserIdentity(user_id=user.id), "old-pass", "new-pass")
        assert policy.login(user_store, "ada@example.com", "new-pass").user.id == user.id

    def test_wrong_old_password_leaves_hash_untouched(self, user_store) -> None:
        user = policy.register(user_store, "Ada", "ada@example.com", "old-pass")
        with pytest.raises(OldPasswordMismatch):
            policy.change_password(user_store, UserIdentity(user_id=user.id), "guess", "new-pass")
        assert policy.login(user_store, "ada@example.com", "old-pass").user.id == user.id

    def test_superuser_identity_is_unauthorized(self, user_store) -> None:
        with pytest.raises(Unauthorized):
            policy.change_password(user_store, AdminIdentity(), "a", "b")

    def test_vanished_user(self, user_store) -> None:
        with pytest.raises(UserNotFound):
            policy.change_password(user_store, UserIdentity(user_id=999), "a", "b")

    def test_missing_fields(self, user_store) -> None:
        with pytest.raises(MissingFields):
            policy.change_password(user_store, UserIdentity(user_id=1), "", "b")


class TestAuthenticate:
    def test_valid_bearer_header(self) -> None:
        token = issue_token(UserIdentity(user_id=5))
        assert policy.authenticate(f"Bearer {token}") == UserIdentity(user_id=5)

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header(self, header) -> None:
        with pytest.raises(NoToken):
            policy.authenticate(header)

    @pytest.mark.parametrize(
        "header",
        ["Token abc", "bearer abc", "Bearer", "Bearer ", "Bearer  abc", "Bearer abc def", "abc"],
    )
    def test_bad_format(self, header: str) -> None:
        with pytest.raises(BadFormat):
            policy.authenticate(header)

    def test_expired_token(self) -> None:
        token = issue_token(UserIdentity(user_id=5), ttl=timedelta(seconds=-1))
        with pytest.raises(InvalidToken):
            policy.authenticate(f"Bearer {token}")


class TestResolveSelf:
    def test_user_gets_fresh_profile(self, user_store) -> None:
        user = policy.register(user_store, "Ada", "ada@example.com", "pw")
        view = policy.resolve_self(user_store, UserIdentity(user_id=user.id))
        assert view.role == "user"
        assert view.user.email == "ada@example.com"

    def test_superuser_gets_role_only(self, user_store) -> None:
        view = policy.resolve_self(user_store, AdminIdentity())
        assert view.role == "admin"
        assert view.user is None

    def test_deleted_user(self, user_store) -> None:
        with pytest.raises(UserNotFound):
            policy.resolve_self(user_store, UserIdentity(user_id=12345))
