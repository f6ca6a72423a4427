from __future__ import annotations

import logging

from secret_keeper.application.dto.auth import AuthenticationResult, AuthFailureReason
from secret_keeper.application.ports.auth_port import AuthPort
from secret_keeper.application.ports.password_hasher_port import PasswordHasherPort
from secret_keeper.domain.exceptions import PasswordComparisonError

from .auth_common import normalize_email


logger = logging.getLogger(__name__)


class LocalIdentityResolver:
    """Maps an email/password pair onto a stored user.

    Every failure path runs one password comparison so that an unknown email
    costs the same as a wrong password.
    """

    def __init__(self, *, auth_port: AuthPort, password_hasher: PasswordHasherPort):
        self._auth_port = auth_port
        self._password_hasher = password_hasher

    def resolve(self, *, email: str, password: str) -> AuthenticationResult:
        user = self._auth_port.get_user_by_email(email=normalize_email(email))
        if user is None:
            self._password_hasher.dummy_verify()
            return AuthenticationResult(user=None, failure=AuthFailureReason.UNKNOWN_USER)

        password_hash = user.password_hash
        if password_hash is None:
            self._password_hasher.dummy_verify()
            return AuthenticationResult(user=None, failure=AuthFailureReason.NO_LOCAL_PASSWORD)

        try:
            valid = self._password_hasher.verify(password, password_hash)
        except PasswordComparisonError:
            logger.warning("local_identity_resolver: malformed_password_hash user_id=%s", user.id)
            valid = False

        if not valid:
            return AuthenticationResult(user=None, failure=AuthFailureReason.BAD_PASSWORD)
        return AuthenticationResult(user=user)
