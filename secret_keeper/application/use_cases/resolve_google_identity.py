from __future__ import annotations

import logging
from uuid import uuid4

from secret_keeper.application.dto.auth import GoogleIdentityInfo
from secret_keeper.application.ports.auth_port import AuthPort
from secret_keeper.domain.entities.user import User
from secret_keeper.domain.exceptions import GoogleTokenValidationError, StoreUnavailableError

from .auth_common import normalize_email, utcnow


logger = logging.getLogger(__name__)

MAX_PROVISION_ATTEMPTS = 3


class GoogleIdentityResolver:
    """Maps a Google profile onto exactly one user, keyed by email.

    An existing row is returned as is, including rows created by local
    registration. New rows carry an external-only credential.
    """

    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def resolve(self, profile: GoogleIdentityInfo) -> User:
        email = normalize_email(profile.email)
        if not email:
            raise GoogleTokenValidationError("Google profile has no email.")
        if not profile.email_verified:
            raise GoogleTokenValidationError("Google email is not verified.")

        for attempt in range(1, MAX_PROVISION_ATTEMPTS + 1):
            user = self._auth_port.get_user_by_email(email=email)
            if user is not None:
                return user

            created = self._auth_port.insert_user_if_absent(
                user_id=str(uuid4()),
                email=email,
                auth_provider="google",
                password_hash=None,
                created_at=utcnow(),
            )
            if created is not None:
                logger.info("google_identity_resolver: provisioned user_id=%s", created.id)
                return created

            logger.info("google_identity_resolver: insert_conflict attempt=%s", attempt)

        raise StoreUnavailableError("Could not resolve Google identity after concurrent insert.")
