"""
Authentication business logic for the HR portal.

Provides:
- ``login`` — lockout check, account-chain validation, credential
  verification and token issuance.
- ``get_current_user`` — FastAPI dependency that validates the access
  token or, when it is expired or absent, rotates the refresh token.
  The full account chain is re-validated on every request.
- ``require_access`` — dependency factory that enforces access codes on
  top of ``get_current_user``.
- ``create_approval_request`` — forgot-password / block-user requests.
- ``build_profile`` — profile payload for login and ``GET /auth/me``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.cache import RedisCache, get_cache
from app.config import get_settings
from app.database import get_db
from app.models.employee import Employee
from app.models.user import User
from app.models.user_approval import UserApproval
from app.schemas.auth import AccessItem, CurrentUser, LoginRequest, ProfileResponse
from app.services.access_service import (
    get_role_access_codes,
    has_any_access,
    list_access_with_flags,
)
from app.services.account_service import (
    AccountChain,
    ensure_usable,
    load_chain_by_nik,
    load_chain_by_user_id,
)
from app.services.login_limiter import LoginAttemptLimiter, format_remaining
from app.services.session_service import RefreshSession, SessionStore
from app.services.storage import ObjectStorage
from app.utils.constants import (
    ACCESS_TOKEN_COOKIE,
    APPROVAL_PENDING,
    REFRESH_TOKEN_COOKIE,
)
from app.utils.cookies import issue_auth_cookies
from app.utils.errors import AppError, ErrorKind
from app.utils.security import (
    TokenExpiredError,
    TokenInvalidError,
    create_access_token,
    verify_password,
    verify_token,
)

logger = logging.getLogger(__name__)

# Attribute on ``request.state`` holding a refresh token rotated mid-request
ROTATED_REFRESH_STATE = "rotated_refresh_token"


def _utcnow() -> datetime:
    # DateTime columns are naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Dependencies: cache-backed collaborators
# ---------------------------------------------------------------------------


def get_session_store(
    cache: Annotated[RedisCache, Depends(get_cache)],
) -> SessionStore:
    return SessionStore(cache, get_settings())


def get_login_limiter(
    cache: Annotated[RedisCache, Depends(get_cache)],
) -> LoginAttemptLimiter:
    settings = get_settings()
    return LoginAttemptLimiter(
        cache,
        settings.LOGIN_LOCK_POLICY,
        settings.LOGIN_ATTEMPT_WINDOW_SECONDS,
    )


# ---------------------------------------------------------------------------
# Identity helpers
# ---------------------------------------------------------------------------


def build_current_user(chain: AccountChain) -> CurrentUser:
    """Project a validated chain onto the sanitised request identity."""
    user, employee = chain.user, chain.employee
    return CurrentUser(
        id=user.id,
        employee_id=employee.id,
        nik=employee.nik,
        name=employee.name,
        email=employee.email,
        role_id=chain.role.id,
        role_name=chain.role.name,
        company=chain.company.name if chain.company else None,
        branch=chain.branch.name if chain.branch else None,
        division=chain.division.name if chain.division else None,
        sub_division=chain.sub_division.name if chain.sub_division else None,
        position=chain.position.name if chain.position else None,
        picture=employee.picture,
    )


def _login_claims(current: CurrentUser) -> dict[str, Any]:
    return {
        "sub": str(current.id),
        "nik": current.nik,
        "name": current.name,
        "role_id": current.role_id,
        "role": current.role_name,
    }


def _locked_error(remaining_seconds: int) -> AppError:
    remaining = format_remaining(remaining_seconds)
    return AppError(
        ErrorKind.LOCKED,
        f"Akun terkunci sementara. Coba lagi dalam {remaining}",
        data={"remaining": remaining, "remaining_seconds": remaining_seconds},
        headers={"Retry-After": str(remaining_seconds)},
    )


def _register_failure(limiter: LoginAttemptLimiter, nik: str) -> AppError:
    result = limiter.record_failure(nik)
    if result.locked:
        return _locked_error(result.remaining_seconds)
    return AppError(
        ErrorKind.UNAUTHORIZED,
        f"NIK atau kata sandi salah. Sisa percobaan: {result.remaining_attempts}",
        data={"remaining_attempts": result.remaining_attempts},
    )


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


@dataclass
class LoginResult:
    user: CurrentUser
    access_token: str
    refresh_token: str
    refresh_session: RefreshSession
    access: list[AccessItem]
    last_login_at: datetime


def login(
    db: Session,
    store: SessionStore,
    limiter: LoginAttemptLimiter,
    payload: LoginRequest,
) -> LoginResult:
    """Verify credentials and open a session.

    Order of checks: lockout → account lookup → account chain → password.
    Unknown NIKs and wrong passwords both count towards the lockout.

    Raises:
        AppError LOCKED: The NIK is locked, or this failure locked it.
        AppError UNAUTHORIZED: Unknown NIK, wrong password, or a broken
                               account chain.
    """
    nik = payload.nik
    remaining = limiter.check_lock_status(nik)
    if remaining > 0:
        logger.info("Login refused, nik=%s locked for %ss", nik, remaining)
        raise _locked_error(remaining)

    chain = load_chain_by_nik(db, nik)
    if chain.user is None:
        logger.warning("Failed login attempt for unknown nik=%s", nik)
        raise _register_failure(limiter, nik)

    ensure_usable(chain)

    if not verify_password(payload.password, chain.user.password):
        logger.warning("Failed login attempt for nik=%s", nik)
        raise _register_failure(limiter, nik)

    limiter.reset(nik)

    current = build_current_user(chain)
    access_token = create_access_token(_login_claims(current))
    refresh_token, session = store.create(current.id, payload.remember_me)

    now = _utcnow()
    user = chain.user
    try:
        user.last_login_at = now
        user.last_activity_at = now
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not update last_login_at for user_id=%s", user.id)

    logger.info("Successful login user_id=%s role=%s", current.id, current.role_name)
    return LoginResult(
        user=current,
        access_token=access_token,
        refresh_token=refresh_token,
        refresh_session=session,
        access=list_access_with_flags(db, current.role_id),
        last_login_at=now,
    )


def logout(request: Request, store: SessionStore) -> None:
    """Revoke the caller's refresh session(s)."""
    for token in (
        request.cookies.get(REFRESH_TOKEN_COOKIE),
        getattr(request.state, ROTATED_REFRESH_STATE, None),
    ):
        if token:
            store.revoke(token)


# ---------------------------------------------------------------------------
# FastAPI dependency: current authenticated user
# ---------------------------------------------------------------------------


def _extract_access_token(request: Request) -> str | None:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return None


def _subject(payload: dict[str, Any]) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AppError(ErrorKind.UNAUTHORIZED, "Token tidak valid") from None


def _refresh_session(
    request: Request,
    response: Response,
    db: Session,
    store: SessionStore,
) -> AccountChain:
    """Exchange the refresh cookie for a new token pair."""
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        raise AppError(ErrorKind.UNAUTHORIZED, "Sesi tidak ditemukan, silakan login")

    session = store.get(refresh_token)
    if session is None:
        raise AppError(ErrorKind.UNAUTHORIZED, "Sesi tidak valid atau telah berakhir")
    if session.is_expired():
        store.revoke(refresh_token)
        logger.info("Refresh session past absolute expiry user_id=%s", session.user_id)
        raise AppError(ErrorKind.UNAUTHORIZED, "Sesi telah berakhir, silakan login kembali")

    try:
        chain = ensure_usable(load_chain_by_user_id(db, session.user_id))
    except AppError:
        store.revoke(refresh_token)
        raise

    new_refresh, new_session = store.rotate(refresh_token, session)
    access_token = create_access_token({"sub": str(chain.user.id)})
    issue_auth_cookies(
        request, response, access_token, new_refresh, store.cookie_max_age(new_session)
    )
    setattr(request.state, ROTATED_REFRESH_STATE, new_refresh)
    logger.debug("Refresh token rotated user_id=%s", chain.user.id)
    return chain


def _touch_activity(db: Session, user: User) -> None:
    # Best-effort; a failed timestamp write must not fail the request
    try:
        user.last_activity_at = _utcnow()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not update last_activity_at for user_id=%s", user.id)


def get_current_user(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> CurrentUser:
    """FastAPI dependency that resolves the caller's identity.

    Reads the access token from the ``access_token`` cookie (or an
    ``Authorization: Bearer`` header).  An expired or missing access
    token falls back to the ``refresh_token`` cookie, which is rotated
    and re-issued on ``response``.

    Returns:
        The sanitised ``CurrentUser``; also stored on ``request.state.user``.

    Raises:
        AppError UNAUTHORIZED: Tampered token, no usable token, unknown or
                               expired refresh session, or a broken
                               account chain.  Auth cookies are cleared
                               by the error handler.
    """
    token = _extract_access_token(request)
    user_id: int | None = None
    if token:
        try:
            user_id = _subject(verify_token(token))
        except TokenExpiredError:
            user_id = None
        except TokenInvalidError:
            raise AppError(ErrorKind.UNAUTHORIZED, "Token tidak valid") from None

    if user_id is not None:
        chain = ensure_usable(load_chain_by_user_id(db, user_id))
    else:
        chain = _refresh_session(request, response, db, store)

    current = build_current_user(chain)
    _touch_activity(db, chain.user)
    request.state.user = current
    return current


# ---------------------------------------------------------------------------
# Access-code enforcement dependency factory
# ---------------------------------------------------------------------------


def require_access(*codes: str):
    """Return a FastAPI dependency that requires any one of *codes*.

    Designed to be used in endpoint signatures via ``Depends``:

    .. code-block:: python

        @router.get("/users")
        def list_users(
            current_user: CurrentUser = Depends(require_access("user.read")),
        ):
            ...

    Raises:
        AppError FORBIDDEN: The caller's role holds none of *codes*.
    """
    required = frozenset(codes)

    def _check_access(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ) -> CurrentUser:
        granted = get_role_access_codes(db, current_user.role_id)
        if not has_any_access(granted, set(required)):
            logger.info(
                "Access denied user_id=%s required=%s", current_user.id, sorted(required)
            )
            raise AppError(
                ErrorKind.FORBIDDEN,
                "Anda tidak memiliki akses ke sumber daya ini",
            )
        return current_user

    return _check_access


# ---------------------------------------------------------------------------
# Account requests
# ---------------------------------------------------------------------------


def create_approval_request(
    db: Session,
    nik: str,
    approval_type: str,
    fields: dict[str, Any],
) -> UserApproval:
    """Record a pending request unless one of the same type is already open.

    Raises:
        AppError NOT_FOUND: No live account uses *nik*.
        AppError CONFLICT: A pending request of this type already exists.
    """
    user = (
        db.query(User)
        .join(Employee, User.employee_id == Employee.id)
        .filter(Employee.nik == nik, User.deleted_at.is_(None))
        .first()
    )
    if user is None:
        raise AppError(ErrorKind.NOT_FOUND, "NIK tidak terdaftar")

    pending = (
        db.query(UserApproval)
        .filter(
            UserApproval.user_id == user.id,
            UserApproval.type == approval_type,
            UserApproval.status == APPROVAL_PENDING,
        )
        .first()
    )
    if pending is not None:
        raise AppError(
            ErrorKind.CONFLICT,
            "Permintaan sebelumnya masih menunggu persetujuan",
        )

    approval = UserApproval(
        user_id=user.id,
        type=approval_type,
        status=APPROVAL_PENDING,
        fields={"nik": nik, **fields},
    )
    db.add(approval)
    db.commit()
    db.refresh(approval)
    logger.info("Approval request created type=%s user_id=%s", approval_type, user.id)
    return approval


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


def build_profile(
    db: Session,
    current: CurrentUser,
    storage: ObjectStorage,
    access: list[AccessItem] | None = None,
    last_login_at: datetime | None = None,
) -> ProfileResponse:
    picture_url = None
    if current.picture:
        try:
            picture_url = storage.get_file_url(current.picture)
        except (BotoCoreError, ClientError):
            logger.warning("Picture URL unavailable for user_id=%s", current.id)
    if access is None:
        access = list_access_with_flags(db, current.role_id)
    if last_login_at is None:
        last_login_at = db.query(User.last_login_at).filter(User.id == current.id).scalar()
    return ProfileResponse(
        user=current,
        picture_url=picture_url,
        access=access,
        last_login_at=last_login_at,
    )
