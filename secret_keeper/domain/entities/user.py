from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Union


AuthProvider = Literal["local", "google"]


@dataclass(frozen=True)
class LocalCredential:
    password_hash: str


@dataclass(frozen=True)
class ExternalCredential:
    provider: AuthProvider


Credential = Union[LocalCredential, ExternalCredential]


@dataclass(frozen=True)
class User:
    id: str
    email: str
    credential: Credential
    secret: str | None
    created_at: datetime

    @property
    def password_hash(self) -> str | None:
        if isinstance(self.credential, LocalCredential):
            return self.credential.password_hash
        return None

    @property
    def auth_provider(self) -> AuthProvider:
        if isinstance(self.credential, LocalCredential):
            return "local"
        return self.credential.provider


@dataclass(frozen=True)
class AuthSession:
    id: str
    user_id: str
    token_hash: str
    expires_at: datetime
    revoked_at: datetime | None
    user_agent: str | None
    ip: str | None
    created_at: datetime
