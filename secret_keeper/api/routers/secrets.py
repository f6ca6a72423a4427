from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from secret_keeper.api.deps import get_get_secret_use_case, get_submit_secret_use_case, require_user
from secret_keeper.api.schemas.auth import SecretForm
from secret_keeper.api.templating import templates
from secret_keeper.application.dto.secrets import SubmitSecretInput
from secret_keeper.application.use_cases.get_secret import GetSecretUseCase
from secret_keeper.application.use_cases.submit_secret import SubmitSecretUseCase
from secret_keeper.domain.entities.user import User


router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request, "home.html", {})


@router.get("/secrets", response_class=HTMLResponse)
def show_secret(
    request: Request,
    current_user: User = Depends(require_user),
    use_case: GetSecretUseCase = Depends(get_get_secret_use_case),
):
    output = use_case.execute(user_id=current_user.id)
    return templates.TemplateResponse(
        request,
        "secrets.html",
        {"secret": output.display, "email": current_user.email},
    )


@router.get("/submit", response_class=HTMLResponse)
def submit_page(request: Request, current_user: User = Depends(require_user)):
    return templates.TemplateResponse(request, "submit.html", {"email": current_user.email})


@router.post("/submit")
def submit_secret(
    form: SecretForm = Depends(SecretForm.as_form),
    current_user: User = Depends(require_user),
    use_case: SubmitSecretUseCase = Depends(get_submit_secret_use_case),
):
    use_case.execute(SubmitSecretInput(user_id=current_user.id, secret=form.secret))
    return RedirectResponse(url="/secrets", status_code=303)
