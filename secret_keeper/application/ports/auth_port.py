from __future__ import annotations

from datetime import datetime
from typing import Protocol

from secret_keeper.domain.entities.user import AuthProvider, User


class AuthPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def insert_user_if_absent(
        self,
        *,
        user_id: str,
        email: str,
        auth_provider: AuthProvider,
        password_hash: str | None,
        created_at: datetime,
    ) -> User | None:
        """Insert in one statement; ``None`` means the email was already taken."""
        ...

    def get_secret(self, *, user_id: str) -> str | None:
        ...

    def update_secret(self, *, user_id: str, secret: str) -> None:
        ...
