from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from secret_keeper.domain.entities.user import AuthSession
from secret_keeper.infrastructure.security.session_binder import SessionBinder


class FakeSessionStore:
    def __init__(self):
        self.sessions: dict[str, AuthSession] = {}

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        user_agent: str | None,
        ip: str | None,
        created_at: datetime,
    ) -> AuthSession:
        session = AuthSession(
            id=session_id,
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            revoked_at=None,
            user_agent=user_agent,
            ip=ip,
            created_at=created_at,
        )
        self.sessions[session.id] = session
        return session

    def get_session_by_token_hash(self, *, token_hash: str) -> AuthSession | None:
        for session in self.sessions.values():
            if session.token_hash == token_hash:
                return session
        return None

    def extend_session(self, *, session_id: str, expires_at: datetime) -> None:
        self.sessions[session_id] = replace(self.sessions[session_id], expires_at=expires_at)

    def revoke_session_by_token_hash(self, *, token_hash: str, revoked_at: datetime) -> None:
        session = self.get_session_by_token_hash(token_hash=token_hash)
        if session is not None and session.revoked_at is None:
            self.sessions[session.id] = replace(session, revoked_at=revoked_at)


def _binder(store: FakeSessionStore, *, ttl_hours: int = 24) -> SessionBinder:
    return SessionBinder(session_store=store, signing_secret="test-secret", ttl_hours=ttl_hours)


def test_issue_returns_random_token_and_persists_only_its_hash():
    store = FakeSessionStore()
    binder = _binder(store)

    first = binder.issue(user_id="user-a", user_agent="pytest", ip="127.0.0.1")
    second = binder.issue(user_id="user-a", user_agent="pytest", ip="127.0.0.1")

    assert first.token != second.token
    stored_hashes = {session.token_hash for session in store.sessions.values()}
    assert first.token not in stored_hashes
    assert binder.hash_token(first.token) in stored_hashes


def test_token_resolves_only_to_its_own_user():
    store = FakeSessionStore()
    binder = _binder(store)
    token_a = binder.issue(user_id="user-a", user_agent=None, ip=None).token
    token_b = binder.issue(user_id="user-b", user_agent=None, ip=None).token

    assert binder.resolve(token=token_a) == "user-a"
    assert binder.resolve(token=token_b) == "user-b"


def test_revoke_makes_token_absent_and_is_idempotent():
    store = FakeSessionStore()
    binder = _binder(store)
    token = binder.issue(user_id="user-a", user_agent=None, ip=None).token

    binder.revoke(token=token)
    binder.revoke(token=token)
    binder.revoke(token="never-issued")
    binder.revoke(token=None)

    assert binder.resolve(token=token) is None


@pytest.mark.parametrize("token", [None, "", "unknown-token"])
def test_resolve_missing_or_unknown_token_is_absent(token):
    assert _binder(FakeSessionStore()).resolve(token=token) is None


def test_expired_session_is_absent():
    store = FakeSessionStore()
    binder = _binder(store)
    token = binder.issue(user_id="user-a", user_agent=None, ip=None).token
    session_id = next(iter(store.sessions))
    store.extend_session(session_id=session_id, expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))

    assert binder.resolve(token=token) is None


def test_naive_expiry_from_store_is_read_as_utc():
    store = FakeSessionStore()
    binder = _binder(store)
    token = binder.issue(user_id="user-a", user_agent=None, ip=None).token
    session_id = next(iter(store.sessions))
    naive_future = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)
    store.extend_session(session_id=session_id, expires_at=naive_future)

    assert binder.resolve(token=token) == "user-a"


def test_resolve_slides_idle_expiry_forward():
    store = FakeSessionStore()
    binder = _binder(store, ttl_hours=1)
    token = binder.issue(user_id="user-a", user_agent=None, ip=None).token
    session_id = next(iter(store.sessions))
    soon = datetime.now(timezone.utc) + timedelta(minutes=5)
    store.extend_session(session_id=session_id, expires_at=soon)

    binder.resolve(token=token)

    assert store.sessions[session_id].expires_at > soon + timedelta(minutes=50)


def test_resolve_session_reports_new_expiry_for_cookie_refresh():
    store = FakeSessionStore()
    binder = _binder(store, ttl_hours=1)
    token = binder.issue(user_id="user-a", user_agent=None, ip=None).token

    resolved = binder.resolve_session(token=token)

    assert resolved.user_id == "user-a"
    assert resolved.expires_at == store.sessions[next(iter(store.sessions))].expires_at
    assert binder.resolve_session(token="unknown") is None


def test_tokens_do_not_cross_signing_secrets():
    store = FakeSessionStore()
    token = _binder(store).issue(user_id="user-a", user_agent=None, ip=None).token
    other = SessionBinder(session_store=store, signing_secret="other-secret")

    assert other.resolve(token=token) is None


def test_signing_secret_is_required():
    with pytest.raises(ValueError):
        SessionBinder(session_store=FakeSessionStore(), signing_secret="")
