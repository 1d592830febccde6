# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from bizcard.domain.users.entities import Identity
from bizcard.domain.users.exceptions import (
    ForbiddenError,
    TokenError,
    UnauthenticatedError,
)
from bizcard.domain.users.repositories import SessionTokenService

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


class AuthenticateRequestUseCase:
    def __init__(self, *, tokens: SessionTokenService) -> None:
        self._tokens = tokens

    def execute(self, authorization: str | None) -> Identity:
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthenticatedError()
        try:
            return self._tokens.verify(token)
        except TokenError as exc:
            raise ForbiddenError(context={"reason": exc.code}) from exc
