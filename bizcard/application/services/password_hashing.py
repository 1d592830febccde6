"""Password hashing strategies."""

from __future__ import annotations

import re

import bcrypt

from bizcard.domain.users.exceptions import InvalidHashFormatError
from bizcard.domain.users.repositories import PasswordHasher
from bizcard.shared.errors.base import ValidationError

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of the secret
MAX_PASSWORD_BYTES = 72

_BCRYPT_HASH_RE = re.compile(r"^\$2[abxy]?\$(0[4-9]|[12]\d|3[01])\$[./A-Za-z0-9]{53}$")


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password_too_long",
                message=f"Password must not exceed {MAX_PASSWORD_BYTES} bytes",
                context={"fields": ["password"]},
            )
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        if not isinstance(hashed, str) or not _BCRYPT_HASH_RE.match(hashed):
            raise InvalidHashFormatError()
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bool(bcrypt.checkpw(secret, hashed.encode("ascii")))
        except ValueError as exc:
            raise InvalidHashFormatError() from exc
