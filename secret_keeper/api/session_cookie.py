from __future__ import annotations

from datetime import datetime, timezone

from starlette.responses import Response

from secret_keeper.shared.config import get_settings


SESSION_REFRESH_STATE_KEY = "session_refresh"


def _cookie_max_age_seconds(expires_at: datetime) -> int:
    now = datetime.now(timezone.utc)
    return max(int((expires_at - now).total_seconds()), 0)


def set_session_cookie(response: Response, *, token: str, expires_at: datetime) -> Response:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        max_age=_cookie_max_age_seconds(expires_at),
        path="/",
    )
    return response


def clear_session_cookie(response: Response) -> Response:
    response.delete_cookie(key=get_settings().session_cookie_name, path="/")
    return response


def sets_session_cookie(response: Response) -> bool:
    prefix = f"{get_settings().session_cookie_name}=".encode("latin-1")
    return any(
        name == b"set-cookie" and value.startswith(prefix)
        for name, value in response.raw_headers
    )
