# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from bizcard.application.use_cases.users.login_user import LoginUserUseCase
from bizcard.application.use_cases.users.register_user import RegisterUserUseCase
from bizcard.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from bizcard.infrastructure.audit import AuditAction, audit_log
from bizcard.interfaces.http.dto.auth import (
    LoginRequestDTO,
    LoginSuccessDTO,
    MessageDTO,
    RegisterRequestDTO,
)
from bizcard.shared.errors.validation import raise_validation_error
from bizcard.shared.logging import logger
from bizcard.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        rate_limiter: InMemoryRateLimiter | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._rate_limiter = rate_limiter

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user = self._register_use_case.execute(dto.identifier, dto.password)
        except UserAlreadyExistsError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=_get_client_ip(),
                details={"identifier": dto.identifier, "reason": "already_exists"},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=user.identifier,
            ip_address=_get_client_ip(),
            success=True,
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        payload = MessageDTO(message="User registered successfully").model_dump()
        return jsonify(payload), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            token = self._login_use_case.execute(dto.identifier, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"identifier": dto.identifier},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=dto.identifier,
            ip_address=ip_address,
            success=True,
        )
        payload = LoginSuccessDTO(message="Login successful", token=token).model_dump()
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        limited = rate_limit(self._rate_limiter)
        bp.add_url_rule("/register", view_func=limited(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=limited(self.login), methods=["POST"])
        return bp
