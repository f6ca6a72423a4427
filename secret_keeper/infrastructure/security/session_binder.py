from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from secret_keeper.application.dto.auth import IssuedSession, ResolvedSession
from secret_keeper.application.ports.session_port import SessionBinderPort, SessionStorePort


logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_HOURS = 24


class SessionBinder(SessionBinderPort):
    """Server-side sessions keyed by an opaque random token.

    Only an HMAC of the token is persisted, and the session row holds nothing
    but the user id. Expiry is an idle timeout: every successful ``resolve``
    pushes ``expires_at`` forward by the TTL.
    """

    def __init__(
        self,
        *,
        session_store: SessionStorePort,
        signing_secret: str,
        ttl_hours: int = DEFAULT_SESSION_TTL_HOURS,
    ):
        if not signing_secret:
            raise ValueError("signing_secret is required.")
        self._session_store = session_store
        self._signing_key = signing_secret.encode("utf-8")
        self._ttl = timedelta(hours=ttl_hours)

    def hash_token(self, token: str) -> str:
        return hmac.new(self._signing_key, token.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(self, *, user_id: str, user_agent: str | None, ip: str | None) -> IssuedSession:
        now = utcnow()
        token = secrets.token_urlsafe(32)
        expires_at = now + self._ttl
        self._session_store.create_session(
            session_id=str(uuid4()),
            user_id=user_id,
            token_hash=self.hash_token(token),
            expires_at=expires_at,
            user_agent=user_agent,
            ip=ip,
            created_at=now,
        )
        return IssuedSession(token=token, expires_at=expires_at)

    def resolve(self, *, token: str | None) -> str | None:
        resolved = self.resolve_session(token=token)
        return resolved.user_id if resolved else None

    def resolve_session(self, *, token: str | None) -> ResolvedSession | None:
        if not token:
            return None
        session = self._session_store.get_session_by_token_hash(token_hash=self.hash_token(token))
        if session is None or session.revoked_at is not None:
            return None

        now = utcnow()
        if _as_utc(session.expires_at) <= now:
            logger.debug("session_binder: expired session_id=%s", session.id)
            return None

        expires_at = now + self._ttl
        self._session_store.extend_session(session_id=session.id, expires_at=expires_at)
        return ResolvedSession(user_id=session.user_id, expires_at=expires_at)

    def revoke(self, *, token: str | None) -> None:
        if not token:
            return
        self._session_store.revoke_session_by_token_hash(
            token_hash=self.hash_token(token),
            revoked_at=utcnow(),
        )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
