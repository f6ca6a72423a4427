from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from secret_keeper.domain.exceptions import OauthStateError


DEFAULT_STATE_TTL_SECONDS = 600


class OauthStateService:
    """Signs the OAuth ``state`` value so the callback can prove it started here."""

    def __init__(self, *, signing_secret: str, ttl_seconds: int = DEFAULT_STATE_TTL_SECONDS):
        if not signing_secret:
            raise ValueError("signing_secret is required.")
        self._signing_secret = signing_secret
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "type": "oauth_state",
            "nonce": secrets.token_urlsafe(16),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self._ttl_seconds)).timestamp()),
        }
        return jwt.encode(payload, self._signing_secret, algorithm="HS256")

    def verify(self, *, state: str | None, expected: str | None) -> None:
        if not state or not expected:
            raise OauthStateError("Missing OAuth state.")
        if not hmac.compare_digest(state, expected):
            raise OauthStateError("OAuth state mismatch.")
        try:
            payload = jwt.decode(state, self._signing_secret, algorithms=["HS256"])
        except jwt.PyJWTError as exc:
            raise OauthStateError("Invalid OAuth state.") from exc
        if payload.get("type") != "oauth_state":
            raise OauthStateError("Invalid OAuth state type.")
