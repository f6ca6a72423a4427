from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from secret_keeper.api.routers import auth, secrets
from secret_keeper.api.session_cookie import (
    SESSION_REFRESH_STATE_KEY,
    set_session_cookie,
    sets_session_cookie,
)
from secret_keeper.api.templating import templates
from secret_keeper.domain.exceptions import (
    LoginRequiredError,
    PasswordHashingError,
    ServiceConfigurationError,
    StoreUnavailableError,
)
from secret_keeper.shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI(title="Secret Keeper")
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
app.include_router(secrets.router)
app.include_router(auth.router)


@app.middleware("http")
async def _slide_session_cookie(request: Request, call_next):
    setattr(request.state, SESSION_REFRESH_STATE_KEY, None)
    response = await call_next(request)
    refresh = getattr(request.state, SESSION_REFRESH_STATE_KEY, None)
    if refresh is not None and not sets_session_cookie(response):
        token, expires_at = refresh
        set_session_cookie(response, token=token, expires_at=expires_at)
    return response


def _error_page(request: Request, *, status_code: int):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": "Something went wrong. Please try again later."},
        status_code=status_code,
    )


@app.exception_handler(LoginRequiredError)
async def _login_required(request: Request, exc: LoginRequiredError):
    return RedirectResponse(url="/login", status_code=302)


@app.exception_handler(StoreUnavailableError)
async def _store_unavailable(request: Request, exc: StoreUnavailableError):
    logger.error("main: store_unavailable path=%s", request.url.path, exc_info=exc)
    return _error_page(request, status_code=503)


@app.exception_handler(PasswordHashingError)
async def _hashing_failed(request: Request, exc: PasswordHashingError):
    logger.error("main: password_hashing_failed path=%s", request.url.path, exc_info=exc)
    return _error_page(request, status_code=500)


@app.exception_handler(ServiceConfigurationError)
async def _misconfigured(request: Request, exc: ServiceConfigurationError):
    logger.error("main: misconfigured path=%s detail=%s", request.url.path, exc)
    return _error_page(request, status_code=500)
