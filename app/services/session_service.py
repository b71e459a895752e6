"""
Refresh-token sessions stored in Redis.

A refresh token is an opaque identifier; the JSON entry under
``refresh_token:<id>`` is what makes it valid.  Each entry records the
owning user, whether the login used "remember me", and — for ordinary
logins — an absolute expiry that survives every rotation.

Lifetimes
---------
- ``remember_me=False``: ``absolute_expires_at = login + REFRESH_ABSOLUTE_DAYS``.
  The key TTL is ``REFRESH_TOKEN_TTL_DAYS`` capped at that instant.
- ``remember_me=True``: no absolute expiry; the key TTL is renewed to
  ``REFRESH_TOKEN_TTL_DAYS`` on every rotation.

On rotation the old key is not deleted outright: its TTL is cut to
``REFRESH_GRACE_SECONDS`` so concurrent requests still carrying the old
token during that window are not logged out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from app.cache import RedisCache
from app.config import Settings
from app.utils.constants import REFRESH_TOKEN_KEY_PREFIX
from app.utils.security import generate_refresh_token

logger = logging.getLogger(__name__)


@dataclass
class RefreshSession:
    user_id: int
    remember_me: bool
    absolute_expires_at: datetime | None
    created_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.absolute_expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.absolute_expires_at

    def to_cache(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "remember_me": self.remember_me,
            "absolute_expires_at": (
                self.absolute_expires_at.isoformat() if self.absolute_expires_at else None
            ),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_cache(cls, raw: dict[str, Any]) -> "RefreshSession":
        absolute = raw.get("absolute_expires_at")
        return cls(
            user_id=int(raw["user_id"]),
            remember_me=bool(raw.get("remember_me", False)),
            absolute_expires_at=_parse_utc(absolute) if absolute else None,
            created_at=_parse_utc(raw["created_at"]),
        )


def _parse_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def refresh_key(token: str) -> str:
    return f"{REFRESH_TOKEN_KEY_PREFIX}{token}"


class SessionStore:
    """Create, read, rotate and revoke refresh-token sessions."""

    def __init__(self, cache: RedisCache, settings: Settings):
        self.cache = cache
        self.settings = settings

    def _ttl_seconds(self, session: RefreshSession, now: datetime) -> int:
        ttl = int(timedelta(days=self.settings.REFRESH_TOKEN_TTL_DAYS).total_seconds())
        if session.absolute_expires_at is not None:
            remaining = int((session.absolute_expires_at - now).total_seconds())
            ttl = min(ttl, remaining)
        return max(1, ttl)

    def _store(self, session: RefreshSession, now: datetime) -> str:
        token = generate_refresh_token()
        self.cache.set_json(refresh_key(token), session.to_cache(), self._ttl_seconds(session, now))
        return token

    def create(self, user_id: int, remember_me: bool) -> tuple[str, RefreshSession]:
        """Open a new refresh session at login time."""
        now = datetime.now(timezone.utc)
        absolute = (
            None
            if remember_me
            else now + timedelta(days=self.settings.REFRESH_ABSOLUTE_DAYS)
        )
        session = RefreshSession(
            user_id=user_id,
            remember_me=remember_me,
            absolute_expires_at=absolute,
            created_at=now,
        )
        token = self._store(session, now)
        logger.debug("Refresh session created user_id=%s remember_me=%s", user_id, remember_me)
        return token, session

    def get(self, token: str) -> RefreshSession | None:
        raw = self.cache.get_json(refresh_key(token))
        if not raw:
            return None
        try:
            return RefreshSession.from_cache(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Malformed refresh session entry, discarding")
            self.cache.delete(refresh_key(token))
            return None

    def rotate(self, old_token: str, session: RefreshSession) -> tuple[str, RefreshSession]:
        """Issue a replacement token carrying the same lifetime semantics.

        The old entry stays readable for ``REFRESH_GRACE_SECONDS``.
        """
        now = datetime.now(timezone.utc)
        renewed = RefreshSession(
            user_id=session.user_id,
            remember_me=session.remember_me,
            absolute_expires_at=session.absolute_expires_at,
            created_at=now,
        )
        token = self._store(renewed, now)
        grace = self.settings.REFRESH_GRACE_SECONDS
        # A token already inside its grace window keeps its original deadline
        if self.cache.ttl(refresh_key(old_token)) > grace:
            self.cache.expire(refresh_key(old_token), grace)
        return token, renewed

    def revoke(self, token: str) -> None:
        self.cache.delete(refresh_key(token))

    def cookie_max_age(self, session: RefreshSession) -> int | None:
        """Browser lifetime of the refresh cookie.

        Only "remember me" sessions get a persistent cookie; ordinary ones
        end with the browser session.
        """
        if not session.remember_me:
            return None
        return int(timedelta(days=self.settings.REFRESH_TOKEN_TTL_DAYS).total_seconds())
