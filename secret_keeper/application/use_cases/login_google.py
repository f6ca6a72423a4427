from __future__ import annotations

from secret_keeper.application.dto.auth import LoginGoogleInput, SessionOutput
from secret_keeper.application.ports.google_oauth_port import GoogleOauthPort
from secret_keeper.application.ports.session_port import SessionBinderPort
from secret_keeper.domain.exceptions import GoogleTokenValidationError

from .auth_common import bind_session
from .resolve_google_identity import GoogleIdentityResolver


class LoginGoogleUseCase:
    def __init__(
        self,
        *,
        google_oauth_port: GoogleOauthPort,
        identity_resolver: GoogleIdentityResolver,
        session_binder: SessionBinderPort,
    ):
        self._google_oauth_port = google_oauth_port
        self._identity_resolver = identity_resolver
        self._session_binder = session_binder

    def execute(self, command: LoginGoogleInput) -> SessionOutput:
        if not command.code:
            raise GoogleTokenValidationError("Missing authorization code.")

        profile = self._google_oauth_port.fetch_identity(code=command.code)
        user = self._identity_resolver.resolve(profile)
        return bind_session(
            user=user,
            session_binder=self._session_binder,
            user_agent=command.user_agent,
            ip=command.ip,
            previous_token=command.previous_session_token,
        )
