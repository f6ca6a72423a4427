from __future__ import annotations

import logging

from secret_keeper.application.dto.auth import LoginLocalInput, SessionOutput
from secret_keeper.application.ports.session_port import SessionBinderPort
from secret_keeper.domain.exceptions import InvalidCredentialsError

from .auth_common import bind_session, require_credentials
from .resolve_local_identity import LocalIdentityResolver


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        identity_resolver: LocalIdentityResolver,
        session_binder: SessionBinderPort,
    ):
        self._identity_resolver = identity_resolver
        self._session_binder = session_binder

    def execute(self, command: LoginLocalInput) -> SessionOutput:
        email, password = require_credentials(command.email, command.password)

        result = self._identity_resolver.resolve(email=email, password=password)
        if not result.ok:
            logger.info("login_local: rejected reason=%s", result.failure.value)
            raise InvalidCredentialsError("Invalid credentials.")

        return bind_session(
            user=result.user,
            session_binder=self._session_binder,
            user_agent=command.user_agent,
            ip=command.ip,
            previous_token=command.previous_session_token,
        )
