"""
Exception handlers rendering every failure in the response envelope.

Mapping
-------
- ``AppError``                → ``kind.status_code`` with its message/data.
- ``RequestValidationError``  → 422, first issue as ``"<field>: <message>"``
  (messages raised by our own validators are shown without the prefix).
- ``IntegrityError``          → 409 (duplicate entry / foreign key).
- other ``SQLAlchemyError``   → 500; raw text only outside production-like envs.
- ``StarletteHTTPException``  → its status (404 becomes "Route not found").
- anything else               → 500 "Internal server error".

Any 401 clears the auth cookies.  Other failures re-apply cookies issued
earlier in the same request (e.g. a refresh rotation before a 403).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.utils.cookies import ISSUED_COOKIES_STATE, append_cookie, clear_auth_cookies
from app.utils.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    data: Any = None,
    headers: dict[str, str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> JSONResponse:
    response = JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "metadata": metadata or {},
            "data": data,
        },
        headers=headers,
    )
    if status_code == ErrorKind.UNAUTHORIZED.status_code:
        clear_auth_cookies(response)
    else:
        for header in getattr(request.state, ISSUED_COOKIES_STATE, None) or []:
            append_cookie(response, header)
    return response


def first_validation_message(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "value_error" and first.get("ctx", {}).get("error") is not None:
        return str(first["ctx"]["error"])
    # Drop the "body"/"query" location prefix
    path = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid request")
    return f"{'.'.join(path)}: {message}" if path else message


def _integrity_message(exc: IntegrityError) -> str:
    text = str(exc.orig).lower()
    if "foreign key" in text:
        return "Foreign key constraint violation"
    if "unique" in text or "duplicate" in text:
        detail = str(exc.orig).split("\n", 1)[0]
        return f"Duplicate entry: {detail}" if get_settings().debug_errors else "Duplicate entry: unique constraint violated"
    return "Database constraint violation"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        log_fn = logger.error if exc.status_code >= 500 else logger.info
        log_fn(
            "%s %s -> %s %s",
            request.method, request.url.path, exc.status_code, exc.message,
        )
        return error_response(request, exc.status_code, exc.message, exc.data, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = first_validation_message(errors)
        details = [
            {
                "path": ".".join(str(p) for p in e.get("loc", ()) if p not in ("body", "query", "path")),
                "message": e.get("msg"),
            }
            for e in errors
        ]
        return error_response(
            request,
            ErrorKind.VALIDATION.status_code,
            message,
            metadata={"errors": details},
        )

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return error_response(request, ErrorKind.CONFLICT.status_code, _integrity_message(exc))

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        message = (
            f"Database error: {exc}"
            if get_settings().debug_errors
            else "Database error occurred"
        )
        return error_response(request, ErrorKind.INTERNAL.status_code, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return error_response(request, exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_response(request, ErrorKind.INTERNAL.status_code, "Internal server error")
