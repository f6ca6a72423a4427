from __future__ import annotations

from datetime import datetime

from sqlalchemy import text

from secret_keeper.application.ports.session_port import SessionStorePort
from secret_keeper.infrastructure.db.mappers.accounts_mapper import map_row_to_auth_session

from .errors import store_errors


_SESSION_COLUMNS = "id, user_id, token_hash, expires_at, revoked_at, user_agent, ip, created_at"


class SqlSessionRepository(SessionStorePort):
    def __init__(self, engine):
        self._engine = engine

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        user_agent: str | None,
        ip: str | None,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.auth_sessions (
                id, user_id, token_hash, expires_at, revoked_at, user_agent, ip, created_at
            ) VALUES (
                :id, :user_id, :token_hash, :expires_at, NULL, :user_agent, :ip, :created_at
            )
            RETURNING {_SESSION_COLUMNS}
        """
        params = {
            "id": session_id,
            "user_id": user_id,
            "token_hash": token_hash,
            "expires_at": expires_at,
            "user_agent": user_agent,
            "ip": ip,
            "created_at": created_at,
        }
        with store_errors("create_session"), self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_auth_session(row)

    def get_session_by_token_hash(self, *, token_hash: str):
        sql = f"""
            SELECT {_SESSION_COLUMNS}
            FROM public.auth_sessions
            WHERE token_hash = :token_hash
            LIMIT 1
        """
        with store_errors("get_session_by_token_hash"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_hash": token_hash}).mappings().first()
        if row is None:
            return None
        return map_row_to_auth_session(row)

    def extend_session(self, *, session_id: str, expires_at: datetime) -> None:
        sql = """
            UPDATE public.auth_sessions
            SET expires_at = :expires_at
            WHERE id = :session_id
              AND revoked_at IS NULL
        """
        with store_errors("extend_session"), self._engine.begin() as conn:
            conn.execute(text(sql), {"session_id": session_id, "expires_at": expires_at})

    def revoke_session_by_token_hash(self, *, token_hash: str, revoked_at: datetime) -> None:
        sql = """
            UPDATE public.auth_sessions
            SET revoked_at = :revoked_at
            WHERE token_hash = :token_hash
              AND revoked_at IS NULL
        """
        with store_errors("revoke_session"), self._engine.begin() as conn:
            conn.execute(text(sql), {"token_hash": token_hash, "revoked_at": revoked_at})
