from __future__ import annotations

import logging
from uuid import uuid4

from secret_keeper.application.dto.auth import RegisterUserInput, SessionOutput
from secret_keeper.application.ports.auth_port import AuthPort
from secret_keeper.application.ports.password_hasher_port import PasswordHasherPort
from secret_keeper.application.ports.session_port import SessionBinderPort
from secret_keeper.domain.exceptions import EmailAlreadyExistsError

from .auth_common import bind_session, require_credentials, utcnow


logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        password_hasher: PasswordHasherPort,
        session_binder: SessionBinderPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher
        self._session_binder = session_binder

    def execute(self, command: RegisterUserInput) -> SessionOutput:
        email, password = require_credentials(command.email, command.password)

        password_hash = self._password_hasher.hash(password)
        user = self._auth_port.insert_user_if_absent(
            user_id=str(uuid4()),
            email=email,
            auth_provider="local",
            password_hash=password_hash,
            created_at=utcnow(),
        )
        if user is None:
            raise EmailAlreadyExistsError("Email already in use.")

        logger.info("register_user: created user_id=%s", user.id)
        return bind_session(
            user=user,
            session_binder=self._session_binder,
            user_agent=command.user_agent,
            ip=command.ip,
            previous_token=command.previous_session_token,
        )
