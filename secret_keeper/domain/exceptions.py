from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class CredentialsValidationError(DomainError, ValueError):
    """Email or password missing from the submitted form."""


class InvalidCredentialsError(DomainError):
    """Credential mismatch or unknown user, reported as one outcome."""


class EmailAlreadyExistsError(DomainError):
    """A user with this email already exists."""


class StoreUnavailableError(DomainError):
    """Credential store could not be reached or the query failed."""


class PasswordHashingError(DomainError):
    """Password hashing backend failed."""


class PasswordComparisonError(DomainError):
    """Stored password digest is malformed."""


class GoogleTokenValidationError(DomainError):
    """Google did not hand back a usable identity."""


class OauthStateError(DomainError):
    """OAuth callback state is missing, expired or does not match."""


class LoginRequiredError(DomainError):
    """Request is not bound to an authenticated session."""


class ServiceConfigurationError(DomainError):
    """A required setting is missing from the environment."""
