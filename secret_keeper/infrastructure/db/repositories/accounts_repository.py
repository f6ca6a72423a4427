from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from secret_keeper.application.ports.auth_port import AuthPort
from secret_keeper.infrastructure.db.mappers.accounts_mapper import map_row_to_user

from .errors import store_errors


logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, auth_provider, password_hash, secret, created_at"
UNIQUE_VIOLATION_SQLSTATE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE


class SqlAccountsRepository(AuthPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with store_errors("get_user_by_id"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM public.users
            WHERE email = :email
            LIMIT 1
        """
        with store_errors("get_user_by_email"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"email": email}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def insert_user_if_absent(
        self,
        *,
        user_id: str,
        email: str,
        auth_provider: str,
        password_hash: str | None,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.users (
                id, email, auth_provider, password_hash, secret, created_at
            ) VALUES (
                :id, :email, :auth_provider, :password_hash, NULL, :created_at
            )
            ON CONFLICT (email) DO NOTHING
            RETURNING {_USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "email": email,
            "auth_provider": auth_provider,
            "password_hash": password_hash,
            "created_at": created_at,
        }
        with store_errors("insert_user_if_absent"):
            try:
                with self._engine.begin() as conn:
                    row = conn.execute(text(sql), params).mappings().first()
            except IntegrityError as exc:
                if not _is_unique_violation(exc):
                    raise
                # unique violation not absorbed by ON CONFLICT: the row exists
                logger.info("accounts_repository: insert_conflict auth_provider=%s", auth_provider)
                return None
        if row is None:
            return None
        return map_row_to_user(row)

    def get_secret(self, *, user_id: str) -> str | None:
        sql = """
            SELECT secret
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with store_errors("get_secret"), self._engine.connect() as conn:
            return conn.execute(text(sql), {"user_id": user_id}).scalar_one_or_none()

    def update_secret(self, *, user_id: str, secret: str) -> None:
        sql = """
            UPDATE public.users
            SET secret = :secret
            WHERE id = :user_id
        """
        with store_errors("update_secret"), self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id, "secret": secret})
