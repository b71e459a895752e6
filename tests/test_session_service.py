"""Refresh-token sessions: lifetimes, rotation and grace window."""

from datetime import datetime, timedelta, timezone

import pytest

from app.config import get_settings
from app.services.session_service import RefreshSession, SessionStore, refresh_key

THIRTY_DAYS = 30 * 24 * 60 * 60


@pytest.fixture
def store(cache):
    return SessionStore(cache, get_settings())


class TestCreate:
    def test_ordinary_login_has_absolute_expiry(self, store, cache):
        before = datetime.now(timezone.utc)
        token, session = store.create(1, remember_me=False)

        assert session.absolute_expires_at is not None
        delta = session.absolute_expires_at - before
        assert timedelta(days=30) - timedelta(seconds=5) <= delta <= timedelta(days=30, seconds=5)
        assert THIRTY_DAYS - 5 <= cache.ttl(refresh_key(token)) <= THIRTY_DAYS
        assert store.cookie_max_age(session) is None

    def test_remember_me_has_no_absolute_expiry(self, store):
        _, session = store.create(1, remember_me=True)
        assert session.absolute_expires_at is None
        assert not session.is_expired()
        assert store.cookie_max_age(session) == THIRTY_DAYS

    def test_entry_is_readable(self, store):
        token, session = store.create(5, remember_me=False)
        loaded = store.get(token)
        assert loaded.user_id == 5
        assert loaded.remember_me is False
        assert loaded.absolute_expires_at == session.absolute_expires_at


class TestRotate:
    def test_rotation_preserves_lifetime_semantics(self, store):
        old_token, session = store.create(1, remember_me=False)
        new_token, renewed = store.rotate(old_token, session)

        assert new_token != old_token
        assert renewed.user_id == 1
        assert renewed.remember_me is False
        assert renewed.absolute_expires_at == session.absolute_expires_at
        assert store.get(new_token).absolute_expires_at == session.absolute_expires_at

    def test_remember_me_survives_rotation(self, store):
        old_token, session = store.create(1, remember_me=True)
        _, renewed = store.rotate(old_token, session)
        assert renewed.remember_me is True
        assert renewed.absolute_expires_at is None

    def test_old_token_kept_for_grace_window(self, store, cache):
        old_token, session = store.create(1, remember_me=False)
        store.rotate(old_token, session)

        grace = get_settings().REFRESH_GRACE_SECONDS
        assert 0 < cache.ttl(refresh_key(old_token)) <= grace
        assert store.get(old_token) is not None

    def test_repeated_rotation_does_not_extend_grace(self, store, cache):
        old_token, session = store.create(1, remember_me=False)
        store.rotate(old_token, session)
        cache.expire(refresh_key(old_token), 2)

        store.rotate(old_token, session)
        assert cache.ttl(refresh_key(old_token)) <= 2


class TestExpiry:
    def test_past_absolute_expiry_is_expired(self):
        now = datetime.now(timezone.utc)
        session = RefreshSession(
            user_id=1,
            remember_me=False,
            absolute_expires_at=now - timedelta(seconds=1),
            created_at=now - timedelta(days=30),
        )
        assert session.is_expired()

    def test_revoke_deletes_entry(self, store):
        token, _ = store.create(1, remember_me=False)
        store.revoke(token)
        assert store.get(token) is None

    def test_malformed_entry_is_discarded(self, store, cache):
        cache.set_json(refresh_key("broken"), {"remember_me": True}, 60)
        assert store.get("broken") is None
        assert cache.get_json(refresh_key("broken")) is None
