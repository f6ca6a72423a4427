from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
from google.auth.transport import requests
from google.oauth2 import id_token

from secret_keeper.application.dto.auth import GoogleIdentityInfo
from secret_keeper.application.ports.google_oauth_port import GoogleOauthPort
from secret_keeper.domain.exceptions import GoogleTokenValidationError


logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_SCOPES = ("openid", "profile", "email")


class GoogleOauthClient(GoogleOauthPort):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        userinfo_url: str = GOOGLE_USERINFO_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._userinfo_url = userinfo_url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def build_authorization_url(self, *, state: str) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    def fetch_identity(self, *, code: str) -> GoogleIdentityInfo:
        try:
            with httpx.Client(timeout=self._timeout_seconds, transport=self._transport) as client:
                tokens = self._exchange_code(client, code=code)
                raw_id_token = tokens.get("id_token")
                if raw_id_token:
                    claims = self._verify_id_token(raw_id_token)
                else:
                    claims = self._fetch_userinfo(client, access_token=tokens.get("access_token"))
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("google_oauth_client: exchange_failed type=%s", type(exc).__name__)
            raise GoogleTokenValidationError("Google token exchange failed.") from exc

        return map_claims_to_identity(claims)

    def _exchange_code(self, client: httpx.Client, *, code: str) -> dict[str, Any]:
        response = client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise GoogleTokenValidationError("Google token response has no access_token.")
        return payload

    def _fetch_userinfo(self, client: httpx.Client, *, access_token: str) -> dict[str, Any]:
        response = client.get(
            self._userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise GoogleTokenValidationError("Google userinfo response is not an object.")
        return payload

    def _verify_id_token(self, raw_id_token: str) -> dict[str, Any]:
        try:
            return id_token_verify(token=raw_id_token, audience=self._client_id)
        except Exception as exc:  # pragma: no cover - depends on external validation errors
            raise GoogleTokenValidationError("Invalid Google id_token.") from exc


def map_claims_to_identity(claims: dict[str, Any]) -> GoogleIdentityInfo:
    email = claims.get("email")
    subject = claims.get("sub")
    if not email or not subject:
        raise GoogleTokenValidationError("Google profile missing required claims.")

    email_verified_raw = claims.get("email_verified", False)
    email_verified = bool(email_verified_raw)
    if isinstance(email_verified_raw, str):
        email_verified = email_verified_raw.lower() == "true"

    name = claims.get("name") if isinstance(claims.get("name"), str) else None
    return GoogleIdentityInfo(
        subject=str(subject),
        email=str(email),
        email_verified=email_verified,
        name=name,
    )


def id_token_verify(*, token: str, audience: str) -> dict:
    request = requests.Request()
    return id_token.verify_oauth2_token(token, request, audience)
