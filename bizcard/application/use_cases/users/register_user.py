# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from bizcard.domain.users.entities import User, normalize_identifier
from bizcard.domain.users.exceptions import UserAlreadyExistsError
from bizcard.domain.users.repositories import PasswordHasher, UserRepository
from bizcard.shared.errors.base import ValidationError


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, identifier: str, password: str) -> User:
        identifier = normalize_identifier(identifier)
        missing = [name for name, value in (("identifier", identifier), ("password", password)) if not value]
        if missing:
            raise ValidationError(
                "identifier_and_password_required",
                message="Identifier and password are required",
                context={"fields": missing},
            )

        # Early exit only; the store's unique constraint is what settles races.
        if self._users.find_by_identifier(identifier):
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(password)
        user = User(id=0, identifier=identifier, password_hash=hashed, created_at=datetime.now(UTC))
        return self._users.add(user)
