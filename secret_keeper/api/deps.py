from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, Request

from secret_keeper.api.session_cookie import SESSION_REFRESH_STATE_KEY
from secret_keeper.application.ports.auth_port import AuthPort
from secret_keeper.application.ports.google_oauth_port import GoogleOauthPort
from secret_keeper.application.ports.password_hasher_port import PasswordHasherPort
from secret_keeper.application.ports.session_port import SessionBinderPort
from secret_keeper.application.use_cases.get_secret import GetSecretUseCase
from secret_keeper.application.use_cases.login_google import LoginGoogleUseCase
from secret_keeper.application.use_cases.login_local import LoginLocalUseCase
from secret_keeper.application.use_cases.logout_session import LogoutSessionUseCase
from secret_keeper.application.use_cases.register_user import RegisterUserUseCase
from secret_keeper.application.use_cases.resolve_google_identity import GoogleIdentityResolver
from secret_keeper.application.use_cases.resolve_local_identity import LocalIdentityResolver
from secret_keeper.application.use_cases.submit_secret import SubmitSecretUseCase
from secret_keeper.domain.entities.user import User
from secret_keeper.domain.exceptions import LoginRequiredError, ServiceConfigurationError
from secret_keeper.infrastructure.db.engine import get_engine
from secret_keeper.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from secret_keeper.infrastructure.db.repositories.session_repository import SqlSessionRepository
from secret_keeper.infrastructure.security.oauth_state import OauthStateService
from secret_keeper.infrastructure.security.session_binder import SessionBinder
from secret_keeper.shared.config import get_settings


logger = logging.getLogger(__name__)


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise ServiceConfigurationError("POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _require_session_secret() -> str:
    settings = get_settings()
    if not settings.session_secret:
        raise ServiceConfigurationError("SESSION_SECRET is required.")
    return settings.session_secret


def get_auth_port() -> AuthPort:
    return SqlAccountsRepository(_get_db_engine())


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasherPort:
    from secret_keeper.infrastructure.security.password_hasher import PasswordHasher

    return PasswordHasher(rounds=get_settings().password_hash_rounds)


def get_session_binder() -> SessionBinderPort:
    settings = get_settings()
    return SessionBinder(
        session_store=SqlSessionRepository(_get_db_engine()),
        signing_secret=_require_session_secret(),
        ttl_hours=settings.session_ttl_hours,
    )


def get_oauth_state_service() -> OauthStateService:
    return OauthStateService(signing_secret=_require_session_secret())


@lru_cache(maxsize=1)
def get_google_oauth_port() -> GoogleOauthPort:
    from secret_keeper.infrastructure.clients.google_oauth_client import GoogleOauthClient

    settings = get_settings()
    if not settings.google_client_id:
        raise ServiceConfigurationError("GOOGLE_CLIENT_ID is required.")
    if not settings.google_client_secret:
        raise ServiceConfigurationError("GOOGLE_CLIENT_SECRET is required.")
    return GoogleOauthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_callback_url,
        userinfo_url=settings.google_userinfo_url,
        timeout_seconds=settings.google_timeout_seconds,
    )


def get_register_user_use_case(
    auth_port: AuthPort = Depends(get_auth_port),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    session_binder: SessionBinderPort = Depends(get_session_binder),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        auth_port=auth_port,
        password_hasher=password_hasher,
        session_binder=session_binder,
    )


def get_login_local_use_case(
    auth_port: AuthPort = Depends(get_auth_port),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    session_binder: SessionBinderPort = Depends(get_session_binder),
) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        identity_resolver=LocalIdentityResolver(auth_port=auth_port, password_hasher=password_hasher),
        session_binder=session_binder,
    )


def get_login_google_use_case(
    auth_port: AuthPort = Depends(get_auth_port),
    google_oauth_port: GoogleOauthPort = Depends(get_google_oauth_port),
    session_binder: SessionBinderPort = Depends(get_session_binder),
) -> LoginGoogleUseCase:
    return LoginGoogleUseCase(
        google_oauth_port=google_oauth_port,
        identity_resolver=GoogleIdentityResolver(auth_port=auth_port),
        session_binder=session_binder,
    )


def get_logout_session_use_case(
    session_binder: SessionBinderPort = Depends(get_session_binder),
) -> LogoutSessionUseCase:
    return LogoutSessionUseCase(session_binder=session_binder)


def get_get_secret_use_case(auth_port: AuthPort = Depends(get_auth_port)) -> GetSecretUseCase:
    return GetSecretUseCase(auth_port=auth_port)


def get_submit_secret_use_case(auth_port: AuthPort = Depends(get_auth_port)) -> SubmitSecretUseCase:
    return SubmitSecretUseCase(auth_port=auth_port)


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name) or None


def get_optional_user(
    request: Request,
    session_token: str | None = Depends(get_session_token),
    session_binder: SessionBinderPort = Depends(get_session_binder),
    auth_port: AuthPort = Depends(get_auth_port),
) -> User | None:
    resolved = session_binder.resolve_session(token=session_token)
    if resolved is None:
        return None
    user = auth_port.get_user_by_id(user_id=resolved.user_id)
    if user is None:
        logger.info("auth_gate: session_without_user user_id=%s", resolved.user_id)
        return None
    # Picked up by the response hook in main.py to slide the cookie expiry.
    setattr(request.state, SESSION_REFRESH_STATE_KEY, (session_token, resolved.expires_at))
    return user


def require_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise LoginRequiredError("Authentication required.")
    return user
