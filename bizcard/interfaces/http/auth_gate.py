# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import cast

from flask import g, request

from bizcard.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from bizcard.domain.users.entities import Identity
from bizcard.domain.users.exceptions import ForbiddenError, UnauthenticatedError
from bizcard.infrastructure.audit import AuditAction, audit_log
from bizcard.shared.logging import logger


def _client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def current_identity() -> Identity:
    """Identity attached by :class:`AuthGate` for the current request."""
    return cast(Identity, g.identity)


class AuthGate:
    """Decorator that lets a view run only for a valid bearer token."""

    def __init__(self, *, authenticate: AuthenticateRequestUseCase) -> None:
        self._authenticate = authenticate

    def __call__(self, f: Callable):
        @wraps(f)
        def inner(*args, **kwargs):
            try:
                identity = self._authenticate.execute(request.headers.get("Authorization"))
            except (UnauthenticatedError, ForbiddenError) as exc:
                audit_log(
                    AuditAction.ACCESS_DENIED,
                    ip_address=_client_ip(),
                    details={"path": request.path, "reason": exc.code},
                    success=False,
                )
                raise

            g.identity = identity
            logger.debug(f"Auth OK: user={identity.user_id} {request.method} {request.path}")
            return f(*args, **kwargs)

        return inner
