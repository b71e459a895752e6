"""
Auth cookie helpers.

Cookies are written as raw ``Set-Cookie`` headers because Starlette's
``set_cookie`` cannot emit the ``Partitioned`` attribute on every
supported Python version.  All auth cookies are ``HttpOnly`` and
``SameSite=None``; ``Secure`` and ``Partitioned`` are added in
production (browsers reject ``Partitioned`` without ``Secure``).
"""

from __future__ import annotations

from http.cookies import SimpleCookie

from fastapi import Request, Response

from app.config import get_settings
from app.utils.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

# Attribute on ``request.state`` holding cookies issued during the request
ISSUED_COOKIES_STATE = "issued_cookies"


def build_cookie_header(
    key: str,
    value: str,
    *,
    max_age: int | None = None,
    path: str = "/",
    httponly: bool = True,
) -> str:
    settings = get_settings()
    cookie: SimpleCookie = SimpleCookie()
    cookie[key] = value
    morsel = cookie[key]
    morsel["path"] = path
    if max_age is not None:
        morsel["max-age"] = max_age
    morsel["httponly"] = httponly
    morsel["samesite"] = "None"
    if settings.is_production:
        morsel["secure"] = True
    header = morsel.OutputString()
    if settings.is_production:
        header += "; Partitioned"
    return header


def append_cookie(response: Response, header: str) -> None:
    response.headers.append("set-cookie", header)


def issue_auth_cookies(
    request: Request,
    response: Response,
    access_token: str,
    refresh_token: str,
    refresh_max_age: int | None,
) -> None:
    """Set both auth cookies and remember them on ``request.state``.

    The remembered headers let error handlers re-apply freshly rotated
    tokens when the request later fails for an unrelated reason.
    """
    settings = get_settings()
    headers = [
        build_cookie_header(
            ACCESS_TOKEN_COOKIE,
            access_token,
            max_age=settings.ACCESS_TOKEN_EXPIRATION_MINUTES * 60,
        ),
        build_cookie_header(REFRESH_TOKEN_COOKIE, refresh_token, max_age=refresh_max_age),
    ]
    for header in headers:
        append_cookie(response, header)
    setattr(request.state, ISSUED_COOKIES_STATE, headers)


def clear_auth_cookies(response: Response) -> None:
    for key in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        append_cookie(response, build_cookie_header(key, "", max_age=0))
