from __future__ import annotations

from datetime import datetime, timezone

from secret_keeper.application.dto.auth import AuthUserOutput, SessionOutput
from secret_keeper.application.ports.session_port import SessionBinderPort
from secret_keeper.domain.entities.user import User
from secret_keeper.domain.exceptions import CredentialsValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    normalized = normalize_email(email)
    if not normalized:
        raise CredentialsValidationError("email is required.")
    if not password:
        raise CredentialsValidationError("password is required.")
    return normalized, password


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        email=user.email,
        auth_provider=user.auth_provider,
    )


def bind_session(
    *,
    user: User,
    session_binder: SessionBinderPort,
    user_agent: str | None,
    ip: str | None,
    previous_token: str | None = None,
) -> SessionOutput:
    if previous_token:
        session_binder.revoke(token=previous_token)
    issued = session_binder.issue(user_id=user.id, user_agent=user_agent, ip=ip)
    return SessionOutput(
        user=build_auth_user_output(user),
        session_token=issued.token,
        session_expires_at=issued.expires_at,
    )
