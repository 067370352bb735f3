"""
Tests for account and session operations.
"""

import pytest

from makuwro.api import AccountsAPI
from makuwro.exceptions import (
    AccountNotFoundError,
    BadCredentialsError,
    RequiredVariableError,
    UnauthenticatedError,
    UnknownError,
    UsernameFormatError,
)
from makuwro.models import AccountType, Team, User


def last_call(session):
    """Return the keyword arguments of the last session request."""
    return session.request.call_args.kwargs


class TestGetUser:
    """Tests for user lookup and the cached user."""

    def test_self_lookup_fetches_and_caches(self, client, session, respond, user_data):
        session.request.return_value = respond(200, user_data)

        user = client.get_user()

        assert isinstance(user, User)
        assert last_call(session)["url"].endswith("/accounts/user")
        assert client.user is user

    def test_cached_self_lookup_skips_network(self, client, session, user_data):
        client.accounts.cached_user = User.from_dict(user_data)

        assert client.get_user() is client.user
        assert client.get_user(username="alice") is client.user
        assert client.get_user(username="ALICE") is client.user
        assert client.get_user(id="u-1") is client.user
        session.request.assert_not_called()

    def test_self_without_token(self, client, session):
        client.token = None

        with pytest.raises(UnauthenticatedError):
            client.get_user()

        session.request.assert_not_called()

    def test_other_user_not_cached(self, client, session, respond, user_data):
        client.accounts.cached_user = User.from_dict(user_data)
        session.request.return_value = respond(200, {"id": "u-2", "username": "bob"})

        bob = client.get_user(username="bob")

        assert bob.username == "bob"
        assert last_call(session)["url"].endswith("/accounts/users/bob")
        assert client.user.username == "Alice"

    def test_other_user_always_fetched(self, client, session, respond):
        session.request.return_value = respond(200, {"id": "u-2", "username": "bob"})

        client.get_user(username="bob")
        client.get_user(username="bob")

        assert session.request.call_count == 2
        assert client.user is None

    def test_lookup_by_id(self, client, session, respond):
        session.request.return_value = respond(200, {"id": "u-9", "username": "zed"})

        client.get_user(id="u-9")

        assert last_call(session)["url"].endswith("/accounts/users?id=u-9")

    def test_not_found(self, client, session, respond):
        session.request.return_value = respond(404, {"code": 10005})

        with pytest.raises(AccountNotFoundError):
            client.get_user(username="ghost")


class TestSessions:
    """Tests for session tokens."""

    def test_create_session(self, client, session, respond):
        client.token = None
        session.request.return_value = respond(200, {"token": "new-token"})

        token = client.create_session("alice", "secret")

        assert token == "new-token"
        assert client.token == "new-token"
        kwargs = last_call(session)
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/accounts/user/sessions")
        assert kwargs["headers"]["username"] == "alice"
        assert kwargs["headers"]["password"] == "secret"

    def test_bad_credentials(self, client, session, respond):
        session.request.return_value = respond(401, {"code": 10000, "message": "Wrong"})

        with pytest.raises(BadCredentialsError):
            client.create_session("alice", "wrongpw")

        assert client.token == "test-token"

    def test_username_format(self, client, session, respond):
        session.request.return_value = respond(400, {"code": 10013})

        with pytest.raises(UsernameFormatError):
            client.create_session("alice", "wrongpw")

    def test_missing_password(self, client, session):
        with pytest.raises(RequiredVariableError):
            client.create_session("alice", "")
        session.request.assert_not_called()

    def test_delete_own_token(self, client, session, respond):
        session.request.return_value = respond(200)

        client.delete_session_token()

        kwargs = last_call(session)
        assert kwargs["method"] == "DELETE"
        assert kwargs["headers"]["token"] == "test-token"
        assert client.token is None

    def test_delete_other_token(self, client, session, respond):
        session.request.return_value = respond(200)

        client.delete_session_token("other-token")

        assert last_call(session)["headers"]["token"] == "other-token"
        assert client.token == "test-token"

    def test_delete_without_any_token(self, client, session):
        client.token = None

        with pytest.raises(RequiredVariableError):
            client.delete_session_token()


class TestCreateUser:
    """Tests for account creation."""

    def test_create_user(self, client, session, respond, user_data):
        session.request.return_value = respond(200, user_data)

        user = client.create_user("Alice", "secret", 946684800000, "alice@example.com")

        assert user.username == "Alice"
        kwargs = last_call(session)
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/accounts/user")
        assert kwargs["files"]["username"] == (None, "Alice")
        assert kwargs["files"]["birthDate"] == (None, "946684800000")

    def test_missing_email(self, client, session):
        with pytest.raises(RequiredVariableError) as exc_info:
            client.create_user("Alice", "secret", 946684800000, "")

        assert exc_info.value.variable == "email"
        session.request.assert_not_called()


class TestAccountPaths:
    """Tests for self and non-self account paths."""

    def test_account_path(self):
        assert AccountsAPI.account_path(AccountType.USER) == "accounts/user"
        assert AccountsAPI.account_path(AccountType.USER, "bob") == "accounts/users/bob"
        assert AccountsAPI.account_path(AccountType.TEAM, "crew") == "accounts/teams/crew"

    def test_delete_own_account_omits_username(self, client, session, respond, user_data):
        client.accounts.cached_user = User.from_dict(user_data)
        session.request.return_value = respond(200)

        client.delete_account(AccountType.USER, "alice", "secret")

        kwargs = last_call(session)
        assert kwargs["method"] == "DELETE"
        assert kwargs["url"].endswith("/accounts/user")
        assert kwargs["files"]["password"] == (None, "secret")

    def test_delete_other_account_includes_username(self, client, session, respond, user_data):
        client.accounts.cached_user = User.from_dict(user_data)
        session.request.return_value = respond(200)

        client.delete_account(AccountType.USER, "bob", "secret")

        assert last_call(session)["url"].endswith("/accounts/users/bob")

    def test_update_own_account_refreshes_cache(self, client, session, respond, user_data):
        client.accounts.cached_user = User.from_dict(user_data)
        updated = dict(user_data, displayName="Al")
        session.request.return_value = respond(200, updated)

        user = client.update_account(AccountType.USER, "Alice", {"displayName": "Al"})

        kwargs = last_call(session)
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"].endswith("/accounts/user")
        assert client.user is user
        assert client.user.display_name == "Al"

    def test_update_other_account(self, client, session, respond):
        session.request.return_value = respond(200, {"id": "u-2", "username": "bob"})

        user = client.update_account(AccountType.USER, "bob", {"css": "body{}"})

        assert last_call(session)["url"].endswith("/accounts/users/bob")
        assert client.user is None
        assert user.username == "bob"

    def test_update_team(self, client, session, respond):
        session.request.return_value = respond(200, {"id": "t-1", "username": "crew"})

        team = client.update_account(AccountType.TEAM, "crew", {"displayName": "Crew"})

        assert isinstance(team, Team)
        assert last_call(session)["url"].endswith("/accounts/teams/crew")

    def test_team_requires_username(self, client, session):
        with pytest.raises(RequiredVariableError):
            client.delete_account(AccountType.TEAM, None, "secret")
        session.request.assert_not_called()

    def test_disable_account(self, client, session, respond, user_data):
        client.accounts.cached_user = User.from_dict(user_data)
        session.request.return_value = respond(200)

        client.disable_account(AccountType.USER, password="secret")

        kwargs = last_call(session)
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"].endswith("/accounts/user")
        assert kwargs["files"]["isDisabled"] == (None, "true")


class TestEmptyReplies:
    """Tests for success replies without the expected body."""

    def test_create_user_no_content(self, client, session, respond):
        session.request.return_value = respond(204)

        with pytest.raises(UnknownError):
            client.create_user("Alice", "secret", 946684800000, "alice@example.com")

    def test_update_account_no_content(self, client, session, respond):
        session.request.return_value = respond(204)

        with pytest.raises(UnknownError):
            client.update_account(AccountType.USER, "bob", {"css": "body{}"})

        assert client.user is None

    def test_self_lookup_empty_body(self, client, session, respond):
        session.request.return_value = respond(200)

        with pytest.raises(UnknownError):
            client.get_user()

        assert client.user is None

    def test_session_without_token(self, client, session, respond):
        session.request.return_value = respond(200, {"expires": 0})

        with pytest.raises(UnknownError) as exc_info:
            client.create_session("alice", "secret")

        assert not isinstance(exc_info.value, UnauthenticatedError)
        assert client.token == "test-token"
