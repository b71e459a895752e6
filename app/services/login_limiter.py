"""
Failed-login tracking with escalating lockouts.

State per NIK lives in Redis under ``login:user:<nik>``.  The lock policy
is a sequence of tiers ``(max_attempts, lock_seconds)``; level *n* uses
tier *n* and the last tier repeats.  With the default
``[(3, 60), (2, 300), (5, 1800)]``:

- 3 failures        → locked 1 minute,   level 0 → 1
- 2 more failures   → locked 5 minutes,  level 1 → 2
- 5 more failures   → locked 30 minutes, level stays 2

Both the lock decision and the "remaining attempts" figure shown to the
user are computed from the same tier, so they cannot disagree.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass

from app.cache import RedisCache
from app.utils.constants import LOGIN_ATTEMPT_KEY_PREFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockTier:
    max_attempts: int
    lock_seconds: int


@dataclass
class LoginAttemptState:
    attempts: int = 0
    total_failures: int = 0
    level: int = 0
    locked_until: float | None = None


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of recording one failed login.

    Attributes:
        locked: Whether this failure triggered a lock.
        remaining_attempts: Failures left before the next lock
                            (0 when ``locked``).
        remaining_seconds: Lock duration left (0 when not ``locked``).
        level: Lock level after this failure.
    """

    locked: bool
    remaining_attempts: int
    remaining_seconds: int
    level: int


class LoginAttemptLimiter:
    def __init__(
        self,
        cache: RedisCache,
        policy: Sequence[Sequence[int]],
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not policy:
            raise ValueError("LOGIN_LOCK_POLICY must define at least one tier")
        self.tiers = tuple(LockTier(int(a), int(s)) for a, s in policy)
        if any(t.max_attempts < 1 or t.lock_seconds < 1 for t in self.tiers):
            raise ValueError("LOGIN_LOCK_POLICY tiers must be positive")
        self.cache = cache
        self.window_seconds = window_seconds
        self.clock = clock

    @staticmethod
    def key(nik: str) -> str:
        return f"{LOGIN_ATTEMPT_KEY_PREFIX}{nik}"

    def tier_for(self, level: int) -> LockTier:
        return self.tiers[min(level, len(self.tiers) - 1)]

    def _load(self, nik: str) -> LoginAttemptState:
        raw = self.cache.get_json(self.key(nik))
        if not raw:
            return LoginAttemptState()
        try:
            return LoginAttemptState(**raw)
        except TypeError:
            logger.warning("Malformed login attempt entry for nik=%s, resetting", nik)
            return LoginAttemptState()

    def _save(self, nik: str, state: LoginAttemptState, now: float) -> None:
        ttl = self.window_seconds
        if state.locked_until is not None:
            ttl = max(ttl, math.ceil(state.locked_until - now))
        self.cache.set_json(self.key(nik), asdict(state), ttl)

    def check_lock_status(self, nik: str) -> int:
        """Return the seconds left on an active lock, or 0 when not locked."""
        state = self._load(nik)
        if state.locked_until is None:
            return 0
        return max(0, math.ceil(state.locked_until - self.clock()))

    def record_failure(self, nik: str) -> AttemptResult:
        now = self.clock()
        state = self._load(nik)
        if state.locked_until is not None and state.locked_until <= now:
            state.locked_until = None

        tier = self.tier_for(state.level)
        state.attempts += 1
        state.total_failures += 1

        if state.attempts >= tier.max_attempts:
            state.locked_until = now + tier.lock_seconds
            state.attempts = 0
            state.level = min(state.level + 1, len(self.tiers) - 1)
            self._save(nik, state, now)
            logger.warning(
                "Login locked nik=%s for %ss (failures=%s, level=%s)",
                nik, tier.lock_seconds, state.total_failures, state.level,
            )
            return AttemptResult(
                locked=True,
                remaining_attempts=0,
                remaining_seconds=tier.lock_seconds,
                level=state.level,
            )

        self._save(nik, state, now)
        return AttemptResult(
            locked=False,
            remaining_attempts=tier.max_attempts - state.attempts,
            remaining_seconds=0,
            level=state.level,
        )

    def reset(self, nik: str) -> None:
        self.cache.delete(self.key(nik))


def format_remaining(seconds: int) -> str:
    """Render a lock duration for users, e.g. ``"4 menit 5 detik"``."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours} jam")
    if minutes:
        parts.append(f"{minutes} menit")
    if secs or not parts:
        parts.append(f"{secs} detik")
    return " ".join(parts)
