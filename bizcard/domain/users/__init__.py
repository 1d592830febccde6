# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Identity, User, normalize_identifier
from .exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidHashFormatError,
    StoreUnavailableError,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
    UserAlreadyExistsError,
)
from .repositories import PasswordHasher, SessionTokenService, UserRepository

__all__ = [
    "ForbiddenError",
    "Identity",
    "InvalidCredentialsError",
    "InvalidHashFormatError",
    "PasswordHasher",
    "SessionTokenService",
    "StoreUnavailableError",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "UnauthenticatedError",
    "User",
    "UserAlreadyExistsError",
    "UserRepository",
    "normalize_identifier",
]
