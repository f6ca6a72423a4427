from __future__ import annotations

from secret_keeper.application.dto.auth import LogoutInput
from secret_keeper.application.ports.session_port import SessionBinderPort


class LogoutSessionUseCase:
    def __init__(self, *, session_binder: SessionBinderPort):
        self._session_binder = session_binder

    def execute(self, command: LogoutInput) -> None:
        self._session_binder.revoke(token=command.session_token)
