"""
CSRF protection (double-submit).

``GET /auth/csrf-token`` stores a random secret in the httpOnly ``_csrf``
cookie and returns a token signed with it.  Unsafe requests on protected
routes must echo that token in the ``X-CSRF-Token`` header.
"""

from __future__ import annotations

import logging

from fastapi import Request, Response

from app.config import get_settings
from app.utils.constants import CSRF_COOKIE, CSRF_HEADER
from app.utils.cookies import append_cookie, build_cookie_header
from app.utils.errors import AppError, ErrorKind
from app.utils.security import create_csrf_token, generate_csrf_secret, verify_csrf_token

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def issue_csrf_token(request: Request, response: Response) -> str:
    """Return a token for the caller's secret, creating the secret if needed."""
    settings = get_settings()
    secret = request.cookies.get(CSRF_COOKIE)
    if not secret:
        secret = generate_csrf_secret()
        append_cookie(
            response,
            build_cookie_header(CSRF_COOKIE, secret, max_age=settings.CSRF_MAX_AGE_SECONDS),
        )
    return create_csrf_token(secret)


def csrf_protect(request: Request) -> None:
    """FastAPI dependency rejecting unsafe requests without a valid token."""
    if not get_settings().CSRF_ENABLED or request.method in SAFE_METHODS:
        return
    secret = request.cookies.get(CSRF_COOKIE)
    token = request.headers.get(CSRF_HEADER)
    if not verify_csrf_token(secret, token):
        logger.warning("CSRF check failed path=%s", request.url.path)
        raise AppError(ErrorKind.FORBIDDEN, "Invalid CSRF token")
