from __future__ import annotations

from fastapi import Form
from pydantic import BaseModel


class CredentialsForm(BaseModel):
    email: str = ""
    password: str = ""

    @classmethod
    def as_form(
        cls,
        username: str = Form(default=""),
        email: str = Form(default=""),
        password: str = Form(default=""),
    ) -> "CredentialsForm":
        # The login and register pages post the email as ``username``.
        return cls(email=username or email, password=password)


class SecretForm(BaseModel):
    secret: str = ""

    @classmethod
    def as_form(cls, secret: str = Form(default="")) -> "SecretForm":
        return cls(secret=secret)
