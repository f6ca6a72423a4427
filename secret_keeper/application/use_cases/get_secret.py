from __future__ import annotations

from secret_keeper.application.dto.secrets import SecretOutput
from secret_keeper.application.ports.auth_port import AuthPort


class GetSecretUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> SecretOutput:
        return SecretOutput(secret=self._auth_port.get_secret(user_id=user_id))
