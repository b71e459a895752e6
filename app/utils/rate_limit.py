"""
Fixed-window request rate limiting backed by Redis.

The window key combines client IP, user agent, method and path, hashed so
arbitrary header content cannot collide with other keys.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Depends, Request

from app.cache import RedisCache, get_cache
from app.config import get_settings
from app.utils.constants import RATE_LIMIT_KEY_PREFIX
from app.utils.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Too many request, try again later."


def rate_limit_key(request: Request) -> str:
    ip = request.client.host if request.client else "unknown-ip"
    agent = request.headers.get("user-agent", "unknown-agent")
    raw = f"{ip}:{agent}:{request.method.lower()}:{request.url.path}"
    return f"{RATE_LIMIT_KEY_PREFIX}{hashlib.sha256(raw.encode()).hexdigest()}"


def rate_limit(
    max_requests: int | None = None,
    window_seconds: int | None = None,
    message: str = DEFAULT_MESSAGE,
):
    """Return a dependency allowing *max_requests* per *window_seconds*.

    Defaults come from ``RATE_LIMIT_MAX`` / ``RATE_LIMIT_WINDOW_SECONDS``
    and are read per request so settings overrides take effect.
    """

    def _check(
        request: Request,
        cache: Annotated[RedisCache, Depends(get_cache)],
    ) -> None:
        settings = get_settings()
        limit = max_requests if max_requests is not None else settings.RATE_LIMIT_MAX
        window = window_seconds if window_seconds is not None else settings.RATE_LIMIT_WINDOW_SECONDS
        if limit <= 0:
            return
        count, reset_after = cache.hit(rate_limit_key(request), window)
        if count > limit:
            logger.warning("Rate limit hit path=%s count=%s", request.url.path, count)
            raise AppError(
                ErrorKind.TOO_MANY_REQUESTS,
                message,
                headers={"Retry-After": str(max(1, reset_after))},
            )

    return _check
