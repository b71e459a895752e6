"""
Authentication router for the HR portal API.

Mounts under ``/auth`` (prefix set in ``main.py``).

Endpoints:
    GET  /csrf-token      — Issue a CSRF token (and its ``_csrf`` secret cookie).
    POST /login           — Authenticate with NIK + password; sets auth cookies.
    POST /logout          — Revoke the refresh session and clear cookies.
    POST /forgot-password — Raise a password reset request for approval.
    POST /block-user      — Raise an account block request for approval.
    GET  /me              — Profile of the currently authenticated user.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import (
    ApprovalResponse,
    BlockUserRequest,
    CsrfTokenResponse,
    CurrentUser,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileResponse,
)
from app.schemas.common import ApiResponse, api_response
from app.services import auth_service
from app.services.auth_service import (
    get_current_user,
    get_login_limiter,
    get_session_store,
)
from app.services.login_limiter import LoginAttemptLimiter
from app.services.session_service import SessionStore
from app.services.storage import ObjectStorage, get_storage
from app.utils.constants import APPROVAL_BLOCK_USER, APPROVAL_FORGOT_PASSWORD
from app.utils.cookies import clear_auth_cookies, issue_auth_cookies
from app.utils.csrf import csrf_protect, issue_csrf_token
from app.utils.rate_limit import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _request_fields(request: Request) -> dict[str, str | None]:
    """Client details stored alongside account requests."""
    return {
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
        "requested_at": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# GET /csrf-token
# ---------------------------------------------------------------------------


@router.get(
    "/csrf-token",
    response_model=ApiResponse[CsrfTokenResponse],
    summary="Ambil token CSRF",
    description=(
        "Mengembalikan token CSRF yang wajib dikirim di header ``X-CSRF-Token`` "
        "untuk setiap request POST ke endpoint auth."
    ),
)
def get_csrf_token(request: Request, response: Response):
    token = issue_csrf_token(request, response)
    return api_response(CsrfTokenResponse(csrf_token=token))


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post(
    "/login",
    response_model=ApiResponse[ProfileResponse],
    summary="Login",
    description=(
        "Autentikasi dengan NIK dan kata sandi. Token akses dan refresh "
        "dikirim sebagai cookie httpOnly; body berisi profil pengguna."
    ),
    responses={
        200: {"description": "Login berhasil; cookie ``access_token`` dan ``refresh_token`` diset."},
        401: {"description": "NIK/kata sandi salah atau akun tidak aktif."},
        403: {"description": "Token CSRF tidak valid."},
        422: {"description": "Body request tidak valid."},
        423: {"description": "Akun terkunci sementara karena terlalu banyak percobaan gagal."},
        429: {"description": "Terlalu banyak request."},
    },
    dependencies=[Depends(rate_limit()), Depends(csrf_protect)],
)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    limiter: Annotated[LoginAttemptLimiter, Depends(get_login_limiter)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
):
    """Authenticate a user and open a refresh-token session.

    Args:
        payload: NIK, password and ``remember_me`` flag.
        request: Incoming request (cookies are recorded on its state).
        response: Sub-response receiving the ``Set-Cookie`` headers.
        db: Database session injected by ``get_db``.
        store: Refresh-session store.
        limiter: Per-NIK failed-attempt tracker.
        storage: Object storage used to sign the profile picture URL.

    Returns:
        Envelope with the caller's ``ProfileResponse``.

    Raises:
        AppError 401: Wrong credentials or unusable account.
        AppError 423: The NIK is (or has just become) locked.
    """
    result = auth_service.login(db, store, limiter, payload)
    issue_auth_cookies(
        request,
        response,
        result.access_token,
        result.refresh_token,
        store.cookie_max_age(result.refresh_session),
    )
    profile = auth_service.build_profile(
        db,
        result.user,
        storage,
        access=result.access,
        last_login_at=result.last_login_at,
    )
    return api_response(profile, message="Login berhasil")


# ---------------------------------------------------------------------------
# POST /logout
# ---------------------------------------------------------------------------


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    summary="Logout",
    dependencies=[Depends(csrf_protect)],
)
def logout(
    request: Request,
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Revoke the refresh session and clear both auth cookies."""
    auth_service.logout(request, store)
    clear_auth_cookies(response)
    logger.info("User logged out user_id=%s", current_user.id)
    return api_response(message="Logout berhasil")


# ---------------------------------------------------------------------------
# POST /forgot-password  ·  POST /block-user
# ---------------------------------------------------------------------------


@router.post(
    "/forgot-password",
    response_model=ApiResponse[ApprovalResponse],
    summary="Permintaan reset kata sandi",
    responses={
        404: {"description": "NIK tidak terdaftar."},
        409: {"description": "Masih ada permintaan yang menunggu persetujuan."},
    },
    dependencies=[Depends(rate_limit()), Depends(csrf_protect)],
)
def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    approval = auth_service.create_approval_request(
        db, payload.nik, APPROVAL_FORGOT_PASSWORD, _request_fields(request)
    )
    return api_response(
        ApprovalResponse.model_validate(approval),
        message="Permintaan reset kata sandi telah dikirim",
    )


@router.post(
    "/block-user",
    response_model=ApiResponse[ApprovalResponse],
    summary="Permintaan blokir akun",
    responses={
        404: {"description": "NIK tidak terdaftar."},
        409: {"description": "Masih ada permintaan yang menunggu persetujuan."},
    },
    dependencies=[Depends(rate_limit()), Depends(csrf_protect)],
)
def block_user(
    payload: BlockUserRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    fields = {**_request_fields(request), "reason": payload.reason}
    approval = auth_service.create_approval_request(
        db, payload.nik, APPROVAL_BLOCK_USER, fields
    )
    return api_response(
        ApprovalResponse.model_validate(approval),
        message="Permintaan blokir akun telah dikirim",
    )


# ---------------------------------------------------------------------------
# GET /me
# ---------------------------------------------------------------------------


@router.get(
    "/me",
    response_model=ApiResponse[ProfileResponse],
    summary="Profil pengguna saat ini",
    responses={401: {"description": "Sesi tidak valid; cookie auth dihapus."}},
)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
):
    """Return the profile, access list and signed picture URL of the caller."""
    return api_response(auth_service.build_profile(db, current_user, storage))
