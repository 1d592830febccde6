# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens.

Tokens are HMAC-signed JWTs carrying ``sub`` (the user identity), ``iat``
and ``exp``. Nothing is stored server-side: a token is valid for as long
as its signature checks out and the clock is before ``exp``.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import jwt
from jose.exceptions import JWTError

from bizcard.domain.users.entities import Identity
from bizcard.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from bizcard.domain.users.repositories import SessionTokenService

DEFAULT_TTL = timedelta(hours=1)

_DECODE_OPTIONS = {
    "verify_signature": True,
    # expiry is checked against the injected clock below
    "verify_exp": False,
    "verify_aud": False,
    "require_iat": True,
    "require_exp": True,
    "require_sub": True,
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtSessionTokenService(SessionTokenService):
    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str) -> str:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options=_DECODE_OPTIONS,
            )
        except JWTError as exc:
            raise TokenInvalidError(context={"reason": str(exc)}) from exc

        user_id = claims.get("sub")
        issued = claims.get("iat")
        expires = claims.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalidError(context={"reason": "missing subject"})
        if not isinstance(issued, int) or not isinstance(expires, int):
            raise TokenInvalidError(context={"reason": "malformed timestamps"})

        expires_at = datetime.fromtimestamp(expires, UTC)
        if self._clock() >= expires_at:
            raise TokenExpiredError()

        return Identity(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(issued, UTC),
            expires_at=expires_at,
        )
