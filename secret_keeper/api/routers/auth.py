from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends, Header, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from secret_keeper.api.deps import (
    get_google_oauth_port,
    get_login_google_use_case,
    get_login_local_use_case,
    get_logout_session_use_case,
    get_oauth_state_service,
    get_register_user_use_case,
    get_session_token,
)
from secret_keeper.api.schemas.auth import CredentialsForm
from secret_keeper.api.session_cookie import clear_session_cookie, set_session_cookie
from secret_keeper.api.templating import templates
from secret_keeper.application.dto.auth import (
    LoginGoogleInput,
    LoginLocalInput,
    LogoutInput,
    RegisterUserInput,
    SessionOutput,
)
from secret_keeper.application.ports.google_oauth_port import GoogleOauthPort
from secret_keeper.application.use_cases.login_google import LoginGoogleUseCase
from secret_keeper.application.use_cases.login_local import LoginLocalUseCase
from secret_keeper.application.use_cases.logout_session import LogoutSessionUseCase
from secret_keeper.application.use_cases.register_user import RegisterUserUseCase
from secret_keeper.domain.exceptions import (
    CredentialsValidationError,
    EmailAlreadyExistsError,
    GoogleTokenValidationError,
    InvalidCredentialsError,
    OauthStateError,
)
from secret_keeper.infrastructure.security.oauth_state import OauthStateService
from secret_keeper.shared.config import get_settings


router = APIRouter()
logger = logging.getLogger(__name__)

OAUTH_STATE_COOKIE_NAME = "oauth_state"
OAUTH_STATE_COOKIE_PATH = "/auth/google"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _client_ip(request: Request, x_forwarded_for: str | None) -> str | None:
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip() or None
    return request.client.host if request.client else None


def _signed_in_redirect(output: SessionOutput) -> RedirectResponse:
    return set_session_cookie(
        _redirect("/secrets"),
        token=output.session_token,
        expires_at=output.session_expires_at,
    )


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return templates.TemplateResponse(request, "register.html", {})


@router.post("/login")
def login_local(
    request: Request,
    form: CredentialsForm = Depends(CredentialsForm.as_form),
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    session_token: str | None = Depends(get_session_token),
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(
            LoginLocalInput(
                email=form.email,
                password=form.password,
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
                previous_session_token=session_token,
            )
        )
    except (InvalidCredentialsError, CredentialsValidationError):
        return _redirect("/login")

    return _signed_in_redirect(output)


@router.post("/register")
def register_user(
    request: Request,
    form: CredentialsForm = Depends(CredentialsForm.as_form),
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    session_token: str | None = Depends(get_session_token),
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(
            RegisterUserInput(
                email=form.email,
                password=form.password,
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
                previous_session_token=session_token,
            )
        )
    except EmailAlreadyExistsError:
        logger.info("auth_router: register_duplicate")
        return _redirect("/login")
    except CredentialsValidationError:
        return _redirect("/register")

    return _signed_in_redirect(output)


@router.get("/logout")
def logout(
    session_token: str | None = Depends(get_session_token),
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    use_case.execute(LogoutInput(session_token=session_token or ""))
    return clear_session_cookie(RedirectResponse(url="/", status_code=302))


@router.get("/auth/google")
def google_authorize(
    google_oauth_port: GoogleOauthPort = Depends(get_google_oauth_port),
    state_service: OauthStateService = Depends(get_oauth_state_service),
):
    state = state_service.issue()
    response = RedirectResponse(
        url=google_oauth_port.build_authorization_url(state=state),
        status_code=302,
    )
    response.set_cookie(
        key=OAUTH_STATE_COOKIE_NAME,
        value=state,
        httponly=True,
        samesite="lax",
        secure=get_settings().session_cookie_secure,
        max_age=state_service.ttl_seconds,
        path=OAUTH_STATE_COOKIE_PATH,
    )
    return response


@router.get("/auth/google/callback")
@router.get("/auth/google/secrets")
def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    state_cookie: str | None = Cookie(default=None, alias=OAUTH_STATE_COOKIE_NAME),
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    session_token: str | None = Depends(get_session_token),
    state_service: OauthStateService = Depends(get_oauth_state_service),
    use_case: LoginGoogleUseCase = Depends(get_login_google_use_case),
):
    if error:
        logger.info("auth_router: google_denied error=%s", error)
        return _clear_state_cookie(_redirect("/login"))

    try:
        state_service.verify(state=state, expected=state_cookie)
        output = use_case.execute(
            LoginGoogleInput(
                code=code or "",
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
                previous_session_token=session_token,
            )
        )
    except (OauthStateError, GoogleTokenValidationError) as exc:
        logger.info("auth_router: google_callback_rejected detail=%s", exc)
        return _clear_state_cookie(_redirect("/login"))

    return _clear_state_cookie(_signed_in_redirect(output))


def _clear_state_cookie(response: RedirectResponse) -> RedirectResponse:
    response.delete_cookie(key=OAUTH_STATE_COOKIE_NAME, path=OAUTH_STATE_COOKIE_PATH)
    return response
