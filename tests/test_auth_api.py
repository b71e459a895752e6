"""End-to-end tests for the /auth endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError
from pydantic import ValidationError

from app.models import User, UserApproval
from app.schemas.auth import ApprovalResponse
from app.services.login_limiter import LoginAttemptLimiter
from app.services.session_service import RefreshSession, refresh_key
from app.utils.security import create_access_token
from conftest import login, set_cookies


class TestLogin:
    def test_success_sets_cookies_and_returns_profile(self, client, make_account, db_session):
        account = make_account(access=["user.read"])
        response = login(client, account.nik)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login berhasil"
        user = body["data"]["user"]
        assert user["nik"] == account.nik
        assert user["role_name"] == account.role.name
        assert "password" not in user
        assert [a["code"] for a in body["data"]["access"] if a["assigned"]] == ["user.read"]

        access_cookie = set_cookies(response, "access_token")[0]
        assert "HttpOnly" in access_cookie
        assert "SameSite=None" in access_cookie
        db_session.expire_all()
        assert db_session.get(User, account.user.id).last_login_at is not None

    def test_ordinary_login_uses_session_cookie(self, client, make_account, cache):
        account = make_account()
        before = datetime.now(timezone.utc)
        response = login(client, account.nik)
        refresh_cookie = set_cookies(response, "refresh_token")[0]
        assert "Max-Age" not in refresh_cookie

        entry = cache.get_json(refresh_key(client.cookies.get("refresh_token")))
        assert entry["remember_me"] is False
        absolute = datetime.fromisoformat(entry["absolute_expires_at"])
        assert abs(absolute - (before + timedelta(days=30))) < timedelta(seconds=5)

    def test_remember_me_uses_persistent_cookie(self, client, make_account):
        account = make_account()
        response = login(client, account.nik, remember_me=True)
        refresh_cookie = set_cookies(response, "refresh_token")[0]
        assert "Max-Age=2592000" in refresh_cookie

    def test_wrong_password_reports_remaining_attempts(self, client, make_account):
        account = make_account()
        response = login(client, account.nik, password="wrong-password")

        assert response.status_code == 401
        assert response.json()["message"] == "NIK atau kata sandi salah. Sisa percobaan: 2"
        assert response.json()["data"] == {"remaining_attempts": 2}

    def test_third_failure_locks_account(self, client, make_account):
        account = make_account()
        login(client, account.nik, password="wrong")
        login(client, account.nik, password="wrong")
        locked = login(client, account.nik, password="wrong")

        assert locked.status_code == 423
        assert locked.json()["data"]["remaining_seconds"] == 60
        assert locked.headers["retry-after"] == "60"

        # Correct password is refused while the lock lasts
        again = login(client, account.nik)
        assert again.status_code == 423
        assert again.json()["message"].startswith("Akun terkunci sementara")
        assert again.json()["data"]["remaining"] in again.json()["message"]
        assert 0 < again.json()["data"]["remaining_seconds"] <= 60

    def test_unknown_nik_counts_as_failure(self, client):
        for _ in range(2):
            assert login(client, "9999999999999999").status_code == 401
        assert login(client, "9999999999999999").status_code == 423

    def test_success_resets_attempts(self, client, make_account, cache):
        account = make_account()
        login(client, account.nik, password="wrong")
        assert cache.get_json(LoginAttemptLimiter.key(account.nik)) is not None

        assert login(client, account.nik).status_code == 200
        assert cache.get_json(LoginAttemptLimiter.key(account.nik)) is None

    def test_inactive_chain_is_refused(self, client, make_account, db_session):
        account = make_account()
        account.division.status = False
        db_session.commit()

        response = login(client, account.nik)
        assert response.status_code == 401
        assert response.json()["message"] == "Divisi tidak aktif"

    def test_validation_messages(self, client):
        short = client.post("/auth/login", json={"nik": "123", "password": "x"})
        assert short.status_code == 422
        assert short.json()["message"] == "NIK harus terdiri dari 16 digit"

        empty = client.post("/auth/login", json={"nik": "", "password": "x"})
        assert empty.json()["message"] == "NIK wajib tidak boleh kosong"

        no_password = client.post(
            "/auth/login", json={"nik": "3201010101010001", "password": ""}
        )
        assert no_password.json()["message"] == "Kata sandi tidak boleh kosong"


class TestCurrentUser:
    def test_me_returns_profile_with_signed_picture(self, client, make_account):
        account = make_account(picture="employees/photo.jpg")
        login(client, account.nik)

        response = client.get("/auth/me")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == account.user.id
        assert data["picture_url"] == "https://files.test/employees/photo.jpg?expires=3600"

    def test_picture_signing_failure_is_not_fatal(self, client, make_account, s3_client):
        s3_client.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
        )
        account = make_account(picture="employees/photo.jpg")
        login(client, account.nik)

        response = client.get("/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["picture_url"] is None

    def test_me_updates_last_activity(self, client, make_account, db_session):
        account = make_account()
        login(client, account.nik)
        client.get("/auth/me")
        db_session.expire_all()
        assert db_session.get(User, account.user.id).last_activity_at is not None

    def test_bearer_header_is_accepted(self, client, make_account):
        account = make_account()
        token = create_access_token({"sub": str(account.user.id)})
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_without_credentials(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Sesi tidak ditemukan, silakan login"

    def test_tampered_token(self, client, make_account):
        account = make_account()
        token = create_access_token({"sub": str(account.user.id)})
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}x"})
        assert response.status_code == 401
        assert response.json()["message"] == "Token tidak valid"

    @pytest.mark.parametrize(
        "link", ["user", "employee", "company", "branch", "division", "position", "role"]
    )
    def test_inactive_link_clears_cookies(self, client, make_account, db_session, link):
        account = make_account()
        login(client, account.nik)
        getattr(account, link).status = False
        db_session.commit()

        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"].endswith("tidak aktif")
        assert "Max-Age=0" in set_cookies(response, "access_token")[0]

    def test_broken_chain_clears_cookies(self, client, make_account, db_session):
        account = make_account()
        login(client, account.nik)
        account.company.deleted_at = datetime(2025, 1, 1)
        db_session.commit()

        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Perusahaan telah dihapus"
        assert "Max-Age=0" in set_cookies(response, "access_token")[0]
        assert "Max-Age=0" in set_cookies(response, "refresh_token")[0]


class TestRefresh:
    def test_missing_access_token_rotates_refresh(self, client, make_account, cache):
        account = make_account()
        login(client, account.nik)
        old_refresh = client.cookies.get("refresh_token")
        client.cookies.delete("access_token")

        response = client.get("/auth/me")
        assert response.status_code == 200
        assert set_cookies(response, "access_token")
        new_refresh = client.cookies.get("refresh_token")
        assert new_refresh != old_refresh
        assert 0 < cache.ttl(refresh_key(old_refresh)) <= 10

    def test_expired_access_token_falls_back_to_refresh(self, client, make_account):
        account = make_account()
        login(client, account.nik)
        expired = create_access_token({"sub": str(account.user.id)}, expires_minutes=-1)
        client.cookies.delete("access_token")

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == 200
        assert set_cookies(response, "refresh_token")

    def test_unknown_refresh_token(self, client):
        client.cookies.set("refresh_token", "does-not-exist")
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Sesi tidak valid atau telah berakhir"

    def test_session_past_absolute_expiry(self, client, make_account, cache):
        account = make_account()
        now = datetime.now(timezone.utc)
        session = RefreshSession(
            user_id=account.user.id,
            remember_me=False,
            absolute_expires_at=now - timedelta(seconds=1),
            created_at=now - timedelta(days=30),
        )
        cache.set_json(refresh_key("stale-token"), session.to_cache(), 60)
        client.cookies.set("refresh_token", "stale-token")

        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Sesi telah berakhir, silakan login kembali"
        assert cache.get_json(refresh_key("stale-token")) is None


class TestLogout:
    def test_logout_revokes_session(self, client, make_account, cache):
        account = make_account()
        login(client, account.nik)
        refresh_token = client.cookies.get("refresh_token")

        response = client.post("/auth/logout")
        assert response.status_code == 200
        assert "Max-Age=0" in set_cookies(response, "refresh_token")[0]
        assert cache.get_json(refresh_key(refresh_token)) is None
        assert client.get("/auth/me").status_code == 401


class TestAccountRequests:
    def test_forgot_password_creates_pending_request(self, client, make_account, db_session):
        account = make_account()
        response = client.post("/auth/forgot-password", json={"nik": account.nik})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "forgot_password"
        assert data["status"] == "pending"
        approval = db_session.get(UserApproval, data["id"])
        assert approval.user_id == account.user.id
        assert approval.fields["nik"] == account.nik

    def test_new_approval_defaults_to_pending(self, make_account, db_session):
        account = make_account()
        approval = UserApproval(user_id=account.user.id, type="block_user")
        db_session.add(approval)
        db_session.commit()

        assert approval.status == "pending"
        assert ApprovalResponse.model_validate(approval).status == "pending"

    def test_approval_response_rejects_unknown_values(self):
        with pytest.raises(ValidationError):
            ApprovalResponse(id=1, type="forgot_password", status="archived")
        with pytest.raises(ValidationError):
            ApprovalResponse(id=1, type="reset_pin", status="pending")

    def test_duplicate_pending_request_conflicts(self, client, make_account):
        account = make_account()
        client.post("/auth/forgot-password", json={"nik": account.nik})
        response = client.post("/auth/forgot-password", json={"nik": account.nik})

        assert response.status_code == 409
        assert response.json()["message"] == "Permintaan sebelumnya masih menunggu persetujuan"

    def test_other_request_type_is_independent(self, client, make_account):
        account = make_account()
        client.post("/auth/forgot-password", json={"nik": account.nik})
        response = client.post(
            "/auth/block-user", json={"nik": account.nik, "reason": "HP hilang"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["type"] == "block_user"

    def test_block_user_stores_reason(self, client, make_account, db_session):
        account = make_account()
        response = client.post(
            "/auth/block-user", json={"nik": account.nik, "reason": "HP hilang"}
        )
        approval = db_session.get(UserApproval, response.json()["data"]["id"])
        assert approval.fields["reason"] == "HP hilang"
        assert "requested_at" in approval.fields

    def test_unknown_nik(self, client):
        response = client.post("/auth/forgot-password", json={"nik": "9999999999999999"})
        assert response.status_code == 404
        assert response.json()["message"] == "NIK tidak terdaftar"
