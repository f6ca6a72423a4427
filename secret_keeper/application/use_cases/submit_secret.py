from __future__ import annotations

import logging

from secret_keeper.application.dto.secrets import SubmitSecretInput
from secret_keeper.application.ports.auth_port import AuthPort


logger = logging.getLogger(__name__)


class SubmitSecretUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: SubmitSecretInput) -> None:
        self._auth_port.update_secret(user_id=command.user_id, secret=command.secret)
        logger.info("submit_secret: stored user_id=%s", command.user_id)
