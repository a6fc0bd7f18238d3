"""Static-account authenticator and bearer session registry."""

import json

import pytest

from schemas import Role
from services.auth import DEFAULT_ACCOUNTS, SessionRegistry, StaticAccountAuthenticator, load_accounts
from services.errors import AuthenticationError


@pytest.fixture
def authenticator():
    return StaticAccountAuthenticator(DEFAULT_ACCOUNTS)


def test_demo_client_signs_in(authenticator):
    user = authenticator.authenticate(Role.CLIENT, {"username": "client@zerobuild.ai", "password": "123456"})
    assert user.id == "CLIENT-8293"
    assert user.role is Role.CLIENT
    assert user.display_name == "client"


def test_demo_admin_signs_in(authenticator):
    user = authenticator.authenticate(Role.ADMIN, {"username": "ADMIN@zerobuild.ai", "password": "789000"})
    assert user.id == "ADMIN-0001"
    assert user.role is Role.ADMIN


@pytest.mark.parametrize("role, username, password", [
    (Role.CLIENT, "client@zerobuild.ai", "wrong"),
    (Role.CLIENT, "nobody@zerobuild.ai", "123456"),
    (Role.ADMIN, "client@zerobuild.ai", "123456"),
    (Role.CLIENT, "", ""),
])
def test_rejected_credentials(authenticator, role, username, password):
    assert authenticator.authenticate(role, {"username": username, "password": password}) is None


def test_load_accounts_from_json():
    raw = json.dumps([{"id": "CLIENT-1", "username": "a@b.c", "password": "pw", "role": "CLIENT"}])
    accounts = load_accounts(raw)
    user = StaticAccountAuthenticator(accounts).authenticate(Role.CLIENT, {"username": "a@b.c", "password": "pw"})
    assert user.id == "CLIENT-1"
    assert user.display_name == "a"


def test_load_accounts_defaults_and_errors():
    assert load_accounts("") == DEFAULT_ACCOUNTS
    with pytest.raises(ValueError):
        load_accounts("{not json")
    with pytest.raises(ValueError):
        load_accounts(json.dumps({"id": "x"}))
    with pytest.raises(ValueError):
        load_accounts(json.dumps([{"id": "x", "username": "y"}]))


def test_session_tokens_resolve_until_revoked(authenticator):
    sessions = SessionRegistry()
    user = authenticator.authenticate(Role.CLIENT, {"username": "client@zerobuild.ai", "password": "123456"})
    token = sessions.issue(user)
    assert sessions.resolve(token) == user
    assert sessions.issue(user) != token
    sessions.revoke(token)
    assert sessions.resolve(token) is None


def test_require_rejects_missing_and_unknown_tokens(authenticator):
    sessions = SessionRegistry()
    user = authenticator.authenticate(Role.ADMIN, {"username": "admin@zerobuild.ai", "password": "789000"})
    assert sessions.require(sessions.issue(user)) == user
    with pytest.raises(AuthenticationError):
        sessions.require(None)
    with pytest.raises(AuthenticationError):
        sessions.require("not-a-token")
