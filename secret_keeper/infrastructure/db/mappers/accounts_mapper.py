from __future__ import annotations

from typing import Any, Mapping

from secret_keeper.domain.entities.user import (
    AuthSession,
    Credential,
    ExternalCredential,
    LocalCredential,
    User,
)


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_credential(row: Mapping[str, Any]) -> Credential:
    provider = row["auth_provider"]
    if provider == "local":
        password_hash = row.get("password_hash")
        if not password_hash:
            raise ValueError("Local user row has no password hash.")
        return LocalCredential(password_hash=password_hash)
    if provider == "google":
        return ExternalCredential(provider="google")
    raise ValueError(f"Unknown auth provider: {provider!r}")


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        email=row["email"],
        credential=map_row_to_credential(row),
        secret=row.get("secret"),
        created_at=row["created_at"],
    )


def map_row_to_auth_session(row: Mapping[str, Any]) -> AuthSession:
    return AuthSession(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        token_hash=row["token_hash"],
        expires_at=row["expires_at"],
        revoked_at=row.get("revoked_at"),
        user_agent=row.get("user_agent"),
        ip=row.get("ip"),
        created_at=row["created_at"],
    )
