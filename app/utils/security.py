"""
Security utilities for the HR portal authentication system.

Provides JWT access-token creation/verification via python-jose, bcrypt
password hashing, opaque refresh-token generation and the signed CSRF
token helpers.  All configuration is sourced from the application
settings singleton so that secrets are never hard-coded in source files.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)


class TokenError(ValueError):
    """Base class for access-token verification failures."""


class TokenExpiredError(TokenError):
    """The token signature is valid but its ``exp`` claim has passed."""


class TokenInvalidError(TokenError):
    """The token is malformed, tampered with, or signed with another key."""


# ---------------------------------------------------------------------------
# Password helpers (bcrypt)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def create_access_token(
    data: dict[str, Any],
    expires_minutes: int | None = None,
) -> str:
    """Create a signed JWT access token.

    The token payload is a copy of *data* augmented with ``exp`` and
    ``iat`` claims.  The ``sub`` (subject) claim should be set by the
    caller, typically ``str(user.id)``.

    Args:
        data: Arbitrary claims to embed in the token payload.
              Must not contain ``exp`` — that claim is set here.
        expires_minutes: Lifetime override; defaults to
              ``ACCESS_TOKEN_EXPIRATION_MINUTES`` from settings.

    Returns:
        A compact, URL-safe JWT string.

    Example::

        token = create_access_token({"sub": str(user.id), "role_id": user.role_id})
    """
    settings = get_settings()
    minutes = (
        settings.ACCESS_TOKEN_EXPIRATION_MINUTES
        if expires_minutes is None
        else expires_minutes
    )
    now = datetime.now(timezone.utc)
    payload = data.copy()
    payload["exp"] = now + timedelta(minutes=minutes)
    payload["iat"] = now

    return jwt.encode(
        payload,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Args:
        token: A compact JWT string obtained from ``create_access_token``.

    Returns:
        The decoded payload dictionary on success.

    Raises:
        TokenExpiredError: The token is authentic but expired; callers may
                           fall back to the refresh-token flow.
        TokenInvalidError: The token cannot be trusted at all.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return payload
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Token kedaluwarsa") from exc
    except JWTError as exc:
        logger.debug("JWT verification failed: %s", exc)
        raise TokenInvalidError("Token tidak valid") from exc


# ---------------------------------------------------------------------------
# Refresh tokens
# ---------------------------------------------------------------------------


def generate_refresh_token() -> str:
    """Return an opaque refresh-token identifier.

    The value carries no claims; the cache entry keyed by it is the only
    source of truth for the session it represents.
    """
    return secrets.token_urlsafe(48)


# ---------------------------------------------------------------------------
# CSRF (double-submit: secret in an httpOnly cookie, token in a header)
# ---------------------------------------------------------------------------


def generate_csrf_secret() -> str:
    return secrets.token_urlsafe(32)


def _csrf_signature(secret: str, salt: str) -> str:
    return hmac.new(
        secret.encode("utf-8"), salt.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def create_csrf_token(secret: str) -> str:
    salt = secrets.token_hex(8)
    return f"{salt}.{_csrf_signature(secret, salt)}"


def verify_csrf_token(secret: str | None, token: str | None) -> bool:
    if not secret or not token or "." not in token:
        return False
    salt, signature = token.split(".", 1)
    return hmac.compare_digest(signature, _csrf_signature(secret, salt))
