from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str = "false") -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "y"}


def _postgres_dsn() -> str:
    dsn = _env("POSTGRES_DSN", "")
    if dsn:
        return dsn
    # Fall back to discrete PG_* variables.
    if not _env("PG_HOST") or not _env("PG_DATABASE"):
        return ""
    url = URL.create(
        "postgresql+psycopg",
        username=_env("PG_USER"),
        password=_env("PG_PASSWORD"),
        host=_env("PG_HOST"),
        port=int(_env("PG_PORT", "5432")),
        database=_env("PG_DATABASE"),
    )
    return url.render_as_string(hide_password=False)


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    session_secret: str
    session_ttl_hours: int
    session_cookie_name: str
    session_cookie_secure: bool
    google_client_id: str
    google_client_secret: str
    google_callback_url: str
    google_userinfo_url: str
    google_timeout_seconds: float
    password_hash_rounds: int
    app_host: str
    app_port: int
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_postgres_dsn(),
        session_secret=_env("SESSION_SECRET", ""),
        session_ttl_hours=int(_env("SESSION_TTL_HOURS", "24")),
        session_cookie_name=_env("SESSION_COOKIE_NAME", "session_token"),
        session_cookie_secure=_bool("SESSION_COOKIE_SECURE"),
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        google_client_secret=_env("GOOGLE_CLIENT_SECRET", ""),
        google_callback_url=_env("GOOGLE_CALLBACK_URL", "http://localhost:3000/auth/google/callback"),
        google_userinfo_url=_env("GOOGLE_USERINFO_URL", "https://www.googleapis.com/oauth2/v3/userinfo"),
        google_timeout_seconds=float(_env("GOOGLE_TIMEOUT_SECONDS", "10")),
        password_hash_rounds=int(_env("PASSWORD_HASH_ROUNDS", "10")),
        app_host=_env("APP_HOST", "0.0.0.0"),
        app_port=int(_env("APP_PORT", "3000")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
