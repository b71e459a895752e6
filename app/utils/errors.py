"""
Application error type and the closed set of error kinds.

Services raise :class:`AppError` with an :class:`ErrorKind`; the HTTP
status is derived from the kind in one place (``ErrorKind.status_code``)
and the envelope is rendered by ``app.middleware.error_handlers``.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation_error"
    LOCKED = "locked"
    TOO_MANY_REQUESTS = "too_many_requests"
    INTERNAL = "internal_error"

    @property
    def status_code(self) -> int:
        return int(_STATUS_BY_KIND[self])


_STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.VALIDATION: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.LOCKED: HTTPStatus.LOCKED,
    ErrorKind.TOO_MANY_REQUESTS: HTTPStatus.TOO_MANY_REQUESTS,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Failure raised by services and dependencies.

    Args:
        kind: Error category; determines the HTTP status.
        message: User-facing message placed in the envelope.
        data: Optional payload placed in the envelope's ``data`` field
              (e.g. the remaining lock duration for ``LOCKED``).
        headers: Optional extra response headers (e.g. ``Retry-After``).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.data = data
        self.headers = headers

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"AppError({self.kind.value!r}, {self.message!r})"
