"""Access-code enforcement on the listing endpoints."""

from datetime import datetime

from app.models import MasterAccess
from app.services.access_service import get_role_access_codes, has_any_access
from app.services.auth_service import require_access
from conftest import login, set_cookies


class TestHasAnyAccess:
    def test_single_overlap_is_enough(self):
        assert has_any_access({"user.read"}, {"user.read", "role.read"})

    def test_no_overlap(self):
        assert not has_any_access({"employee.read"}, {"user.read"})

    def test_empty_grant(self):
        assert not has_any_access(set(), {"user.read"})


def test_role_access_codes_skip_dead_entries(db_session, make_account):
    account = make_account(access=["user.read", "role.read"])
    access = db_session.query(MasterAccess).filter_by(code="role.read").one()
    access.deleted_at = datetime(2025, 1, 1)
    db_session.commit()

    assert get_role_access_codes(db_session, account.role.id) == {"user.read"}


class TestRequireAccess:
    def test_granted(self, client, make_account):
        account = make_account(access=["user.read"])
        login(client, account.nik)
        assert client.get("/api/v1/users").status_code == 200

    def test_denied(self, client, make_account):
        account = make_account(access=["employee.read"])
        login(client, account.nik)

        response = client.get("/api/v1/users")
        assert response.status_code == 403
        assert response.json()["message"] == "Anda tidak memiliki akses ke sumber daya ini"

    def test_role_without_any_access(self, client, make_account):
        account = make_account()
        login(client, account.nik)
        for path in ("/api/v1/users", "/api/v1/employees", "/api/v1/companies", "/api/v1/roles"):
            assert client.get(path).status_code == 403

    def test_inactive_access_code_does_not_grant(self, client, make_account, db_session):
        account = make_account(access=["user.read"])
        db_session.query(MasterAccess).filter_by(code="user.read").one().status = False
        db_session.commit()
        login(client, account.nik)

        assert client.get("/api/v1/users").status_code == 403

    def test_unauthenticated_is_401_not_403(self, client):
        assert client.get("/api/v1/users").status_code == 401

    def test_forbidden_after_refresh_keeps_rotated_cookies(self, client, make_account):
        account = make_account(access=["employee.read"])
        login(client, account.nik)
        client.cookies.delete("access_token")

        response = client.get("/api/v1/users")
        assert response.status_code == 403
        set_cookie = response.headers.get_list("set-cookie")
        assert any(h.startswith("access_token=") and "Max-Age=0" not in h for h in set_cookie)

    def test_invalid_query_after_refresh_keeps_rotated_cookies(self, client, make_account):
        account = make_account(access=["user.read"])
        login(client, account.nik)
        old_refresh = client.cookies.get("refresh_token")
        client.cookies.delete("access_token")

        response = client.get("/api/v1/users", params={"page": 0})
        assert response.status_code == 422
        assert response.json()["metadata"]["errors"]
        access_cookies = set_cookies(response, "access_token")
        refresh_cookies = set_cookies(response, "refresh_token")
        assert access_cookies and "Max-Age=0" not in access_cookies[0]
        assert refresh_cookies and "Max-Age=0" not in refresh_cookies[0]
        assert f"refresh_token={old_refresh};" not in refresh_cookies[0]


def test_require_access_returns_dependency():
    assert callable(require_access("user.read", "role.read"))
