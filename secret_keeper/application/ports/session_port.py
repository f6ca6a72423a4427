from __future__ import annotations

from datetime import datetime
from typing import Protocol

from secret_keeper.application.dto.auth import IssuedSession, ResolvedSession
from secret_keeper.domain.entities.user import AuthSession


class SessionStorePort(Protocol):
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
        ...

    def get_session_by_token_hash(self, *, token_hash: str) -> AuthSession | None:
        ...

    def extend_session(self, *, session_id: str, expires_at: datetime) -> None:
        ...

    def revoke_session_by_token_hash(self, *, token_hash: str, revoked_at: datetime) -> None:
        ...


class SessionBinderPort(Protocol):
    def issue(self, *, user_id: str, user_agent: str | None, ip: str | None) -> IssuedSession:
        ...

    def resolve(self, *, token: str | None) -> str | None:
        ...

    def resolve_session(self, *, token: str | None) -> ResolvedSession | None:
        ...

    def revoke(self, *, token: str | None) -> None:
        ...
