# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from bizcard.domain.users.entities import normalize_identifier
from bizcard.domain.users.exceptions import InvalidCredentialsError
from bizcard.domain.users.repositories import (
    PasswordHasher,
    SessionTokenService,
    UserRepository,
)
from bizcard.shared.errors.base import ValidationError

# Checked for unknown identifiers, matching the wrong-password path.
_DUMMY_PASSWORD = "bizcard-unknown-user"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: SessionTokenService,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._dummy_hash: str | None = None

    def execute(self, identifier: str, password: str) -> str:
        identifier = normalize_identifier(identifier)
        if not identifier or not password:
            raise ValidationError(
                "identifier_and_password_required",
                message="Identifier and password are required",
            )

        user = self._users.find_by_identifier(identifier)
        if user is None:
            self._password_hasher.verify(password, self._get_dummy_hash())
            password_valid = False
        else:
            password_valid = self._password_hasher.verify(password, user.password_hash)

        # Same error for unknown identifier and wrong password.
        if not password_valid:
            raise InvalidCredentialsError()

        return self._tokens.issue(user.identifier)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash
