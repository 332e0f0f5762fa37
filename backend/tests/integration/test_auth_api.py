"""HTTP-level tests for the authentication endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from socialapp.core.errors import UNAUTHORIZED_DETAIL
from socialapp.infra.jwt.rsa_token_provider import RSATokenProvider
from socialapp.services._shared.errors import ConflictError
from socialapp.services.identity.dto import AccountIdentity
from tests.factories.user import UserFactory
from tests.helpers.http import assert_json_keys, json_headers

BASE = "/api/v1/auth"
PASSWORD = "s3cret-pass"
COOKIE = "refreshToken"
SEVEN_DAYS = 7 * 24 * 60 * 60


@pytest.fixture()
def user():
    return UserFactory(username="ada", password=PASSWORD)


def _login(client, username="ada", password=PASSWORD):
    return client.post(f"{BASE}/login", json={"username": username, "password": password})


def _set_cookie_header(resp) -> str:
    headers = [h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{COOKIE}=")]
    assert len(headers) == 1
    return headers[0]


def _cookie_value(resp) -> str:
    return _set_cookie_header(resp).split(";", 1)[0].split("=", 1)[1]


def _assert_uniform_401(resp):
    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["detail"] == UNAUTHORIZED_DETAIL
    assert body["code"] == "unauthorized"


# ------------------------------- Login ------------------------------------ #
def test_login_returns_access_token_and_cookie(client, user):
    resp = _login(client)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert_json_keys(data, {"access_token", "token_type", "user_id", "role", "username"})
    assert data["token_type"] == "Bearer"
    assert data["user_id"] == user.id
    assert data["role"] == "MEMBER"
    assert data["username"] == "ada"
    assert "refresh_token" not in data

    header = _set_cookie_header(resp)
    assert "HttpOnly" in header
    assert "Secure" in header
    assert "SameSite=Strict" in header
    assert "Path=/" in header
    assert f"Max-Age={SEVEN_DAYS}" in header
    assert _cookie_value(resp) not in resp.get_data(as_text=True)


@pytest.mark.parametrize(("username", "password"), [("ada", "wrong-pass"), ("ghost", PASSWORD)])
def test_login_failures_are_uniform(client, user, username, password):
    resp = _login(client, username, password)
    _assert_uniform_401(resp)
    assert not resp.headers.getlist("Set-Cookie")


def test_login_for_vanished_account_is_uniform(client, auth_components, monkeypatch):
    ghost = AccountIdentity(4242, "ghost", "MEMBER", ("ROLE_MEMBER",))
    monkeypatch.setattr(auth_components.service.identity, "authenticate", lambda dto: ghost)

    resp = _login(client, "ghost", PASSWORD)

    _assert_uniform_401(resp)
    assert "4242" not in resp.get_data(as_text=True)
    assert not resp.headers.getlist("Set-Cookie")


def _losing_create(account_id):
    raise ConflictError("RefreshToken", "concurrent session creation")


def test_login_losing_a_race_is_uniform(client, user, auth_components, monkeypatch):
    monkeypatch.setattr(auth_components.service.refresh_store, "create", _losing_create)
    _assert_uniform_401(_login(client))


def test_login_schema_errors(client, db):
    resp = client.post(f"{BASE}/login", json={"username": "ada"})
    assert resp.status_code == 422
    assert "password" in resp.get_json()["details"]["errors"]


# ------------------------------ Refresh ----------------------------------- #
def test_refresh_rotates_cookie(client, user):
    login = _login(client)
    old_value = _cookie_value(login)

    client.set_cookie(COOKIE, old_value)
    resp = client.post(f"{BASE}/refresh")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["access_token"]
    assert "refresh_token" not in data
    new_value = _cookie_value(resp)
    assert new_value != old_value

    # the old value is dead
    client.set_cookie(COOKIE, old_value)
    _assert_uniform_401(client.post(f"{BASE}/refresh"))


def test_refresh_without_cookie(client, db):
    _assert_uniform_401(client.post(f"{BASE}/refresh"))


def test_refresh_with_forged_cookie(client, user):
    client.set_cookie(COOKIE, "forged-value")
    _assert_uniform_401(client.post(f"{BASE}/refresh"))


def test_refresh_losing_a_race_is_uniform(client, user, auth_components, monkeypatch):
    client.set_cookie(COOKIE, _cookie_value(_login(client)))
    monkeypatch.setattr(auth_components.service.refresh_store, "create", _losing_create)

    _assert_uniform_401(client.post(f"{BASE}/refresh"))


def test_logout_then_refresh(client, user):
    login = _login(client)
    value = _cookie_value(login)

    client.set_cookie(COOKIE, value)
    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 204
    assert resp.get_data() == b""
    header = _set_cookie_header(resp)
    assert header.startswith(f"{COOKIE}=;")
    assert "Max-Age=0" in header
    assert "HttpOnly" in header
    assert "Path=/" in header

    client.set_cookie(COOKIE, value)
    _assert_uniform_401(client.post(f"{BASE}/refresh"))


def test_logout_without_cookie_still_succeeds(client, db):
    resp = client.post(f"{BASE}/logout")
    assert resp.status_code == 204
    assert "Max-Age=0" in _set_cookie_header(resp)


# ------------------------------ Register ---------------------------------- #
def _register(client, **overrides):
    payload = {
        "email": "grace@example.com",
        "username": "grace",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    }
    payload.update(overrides)
    return client.post(f"{BASE}/register", json=payload)


def test_register_logs_in(client, db):
    resp = _register(client)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["username"] == "grace"
    assert data["email"] == "grace@example.com"
    assert data["role"] == "MEMBER"
    assert data["access_token"]
    assert _cookie_value(resp)

    me = client.get(f"{BASE}/me", headers=json_headers(data["access_token"]))
    assert me.status_code == 200
    assert me.get_json()["data"]["id"] == data["user_id"]


def test_register_conflicts(client, user):
    assert _register(client, username="ada").status_code == 409
    assert _register(client, email=user.email).status_code == 409


def test_register_password_mismatch(client, db):
    resp = _register(client, confirm_password="something-else")
    assert resp.status_code == 400
    assert not resp.headers.getlist("Set-Cookie")


# -------------------------------- Me -------------------------------------- #
def test_me_requires_token(client, db):
    _assert_uniform_401(client.get(f"{BASE}/me"))


def test_me_rejects_token_from_other_key(client, user):
    from socialapp.core.keys import SigningKeyPair

    stranger = RSATokenProvider(key_pair=SigningKeyPair.generate())
    token = stranger.issue(AccountIdentity(user.id, "ada", "MEMBER", ("ROLE_MEMBER",)))
    _assert_uniform_401(client.get(f"{BASE}/me", headers=json_headers(token)))


def test_me_rejects_expired_token(client, user, key_pair):
    provider = RSATokenProvider(key_pair=key_pair)
    with freeze_time(datetime.now(UTC) - timedelta(hours=1)):
        token = provider.issue(AccountIdentity(user.id, "ada", "MEMBER", ("ROLE_MEMBER",)))
    _assert_uniform_401(client.get(f"{BASE}/me", headers=json_headers(token)))


def test_me_rejects_non_numeric_subject(client, user, key_pair):
    provider = RSATokenProvider(key_pair=key_pair)
    identity = AccountIdentity("abc", "ada", "MEMBER", ("ROLE_MEMBER",))  # type: ignore[arg-type]
    token = provider.issue(identity)
    _assert_uniform_401(client.get(f"{BASE}/me", headers=json_headers(token)))


def test_health(client, db, key_pair):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["db"] == "ok"
    assert body["key_id"] == key_pair.key_id
