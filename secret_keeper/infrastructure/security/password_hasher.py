from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from secret_keeper.application.ports.password_hasher_port import PasswordHasherPort
from secret_keeper.domain.exceptions import (
    CredentialsValidationError,
    PasswordComparisonError,
    PasswordHashingError,
)


DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher(PasswordHasherPort):
    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self._ctx = CryptContext(
            schemes=["bcrypt", "argon2"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
        # Compared against when there is no stored digest, so misses cost a real verify.
        self._dummy_hash = self.hash("secret-keeper-timing-equalizer")

    def hash(self, plain_password: str) -> str:
        try:
            return self._ctx.hash(plain_password)
        except PasswordValueError as exc:
            # e.g. NUL bytes or an oversized password, which bcrypt cannot digest
            raise CredentialsValidationError("Password cannot be used.") from exc
        except (RuntimeError, OSError) as exc:
            raise PasswordHashingError("Password hashing failed.") from exc

    def verify(self, plain_password: str, password_hash: str) -> bool:
        try:
            return bool(self._ctx.verify(plain_password, password_hash))
        except PasswordValueError:
            return False
        except (TypeError, ValueError) as exc:
            raise PasswordComparisonError("Stored password hash is malformed.") from exc

    def dummy_verify(self) -> None:
        self._ctx.verify("", self._dummy_hash)
