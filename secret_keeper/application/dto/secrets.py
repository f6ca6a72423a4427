from __future__ import annotations

from dataclasses import dataclass


SECRET_PLACEHOLDER = "You should submit a secret"


@dataclass(frozen=True)
class SecretOutput:
    secret: str | None

    @property
    def display(self) -> str:
        return self.secret or SECRET_PLACEHOLDER


@dataclass(frozen=True)
class SubmitSecretInput:
    user_id: str
    secret: str
