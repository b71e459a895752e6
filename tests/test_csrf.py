"""Double-submit CSRF protection on the auth POST endpoints."""

import pytest

from app.config import get_settings
from app.utils.constants import CSRF_HEADER
from conftest import PASSWORD


@pytest.fixture
def csrf_enabled(monkeypatch):
    monkeypatch.setattr(get_settings(), "CSRF_ENABLED", True)


def _login_body(nik):
    return {"nik": nik, "password": PASSWORD}


def test_missing_token_is_rejected(client, make_account, csrf_enabled):
    account = make_account()
    response = client.post("/auth/login", json=_login_body(account.nik))
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid CSRF token"


def test_valid_token_is_accepted(client, make_account, csrf_enabled):
    account = make_account()
    issued = client.get("/auth/csrf-token")
    assert issued.status_code == 200
    token = issued.json()["data"]["csrf_token"]
    assert client.cookies.get("_csrf")

    response = client.post(
        "/auth/login", json=_login_body(account.nik), headers={CSRF_HEADER: token}
    )
    assert response.status_code == 200


def test_token_without_secret_cookie_is_rejected(client, make_account, csrf_enabled):
    account = make_account()
    token = client.get("/auth/csrf-token").json()["data"]["csrf_token"]
    client.cookies.delete("_csrf")

    response = client.post(
        "/auth/login", json=_login_body(account.nik), headers={CSRF_HEADER: token}
    )
    assert response.status_code == 403


def test_secret_is_reused_across_token_requests(client, csrf_enabled):
    client.get("/auth/csrf-token")
    secret = client.cookies.get("_csrf")
    second = client.get("/auth/csrf-token")
    assert not second.headers.get_list("set-cookie")
    assert client.cookies.get("_csrf") == secret


def test_disabled_protection_skips_check(client, make_account):
    account = make_account()
    assert client.post("/auth/login", json=_login_body(account.nik)).status_code == 200
