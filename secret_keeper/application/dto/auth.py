from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from secret_keeper.domain.entities.user import User


class AuthFailureReason(str, Enum):
    UNKNOWN_USER = "unknown_user"
    BAD_PASSWORD = "bad_password"
    NO_LOCAL_PASSWORD = "no_local_password"


@dataclass(frozen=True)
class AuthenticationResult:
    user: User | None
    failure: AuthFailureReason | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.failure is None


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    email: str
    auth_provider: str


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    password: str
    user_agent: str | None
    ip: str | None
    previous_session_token: str | None = None


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str
    user_agent: str | None
    ip: str | None
    previous_session_token: str | None = None


@dataclass(frozen=True)
class LoginGoogleInput:
    code: str
    user_agent: str | None
    ip: str | None
    previous_session_token: str | None = None


@dataclass(frozen=True)
class LogoutInput:
    session_token: str


@dataclass(frozen=True)
class IssuedSession:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class ResolvedSession:
    user_id: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionOutput:
    user: AuthUserOutput
    session_token: str
    session_expires_at: datetime


@dataclass(frozen=True)
class GoogleIdentityInfo:
    subject: str
    email: str
    email_verified: bool
    name: str | None
