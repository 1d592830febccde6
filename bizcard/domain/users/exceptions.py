# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from bizcard.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.BAD_REQUEST
    message = "User already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST
    message = "Invalid email or password"


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED
    message = "Authentication credentials were not provided"


class ForbiddenError(DomainError):
    code = "forbidden"
    status = HTTPStatus.FORBIDDEN
    message = "Invalid or expired token"


class TokenError(DomainError):
    code = "token_invalid"
    status = HTTPStatus.FORBIDDEN
    message = "Invalid token"


class TokenInvalidError(TokenError):
    pass


class TokenExpiredError(TokenError):
    code = "token_expired"
    message = "Token has expired"


class InvalidHashFormatError(DomainError):
    code = "invalid_hash_format"
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Stored password hash is malformed"


class StoreUnavailableError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__(code="store_unavailable", message="Credential store is unavailable")
        # Kept for logs only; the response body stays opaque.
        self.operation = operation
