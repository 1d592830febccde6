"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine

from bizcard.application.services.password_hashing import BcryptPasswordHasher
from bizcard.application.services.session_tokens import JwtSessionTokenService
from bizcard.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from bizcard.application.use_cases.users.login_user import LoginUserUseCase
from bizcard.application.use_cases.users.register_user import RegisterUserUseCase
from bizcard.infrastructure.db import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
)
from bizcard.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from bizcard.interfaces.http.auth_gate import AuthGate
from bizcard.interfaces.http.controllers.auth_controller import AuthController
from bizcard.interfaces.http.controllers.misc_controller import MiscController
from bizcard.interfaces.http.controllers.protected_controller import (
    ProtectedController,
)
from bizcard.shared.config import AppConfig
from bizcard.shared.middleware.rate_limit import InMemoryRateLimiter, build_rate_limiter


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> SessionFactory:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.auth.bcrypt_rounds)

    @cached_property
    def token_service(self) -> JwtSessionTokenService:
        return JwtSessionTokenService(
            self.config.jwt_secret,
            ttl=timedelta(seconds=self.config.auth.token_ttl_seconds),
            algorithm=self.config.auth.jwt_algorithm,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def authenticate_request_use_case(self) -> AuthenticateRequestUseCase:
        return AuthenticateRequestUseCase(tokens=self.token_service)

    @cached_property
    def auth_gate(self) -> AuthGate:
        return AuthGate(authenticate=self.authenticate_request_use_case)

    @cached_property
    def rate_limiter(self) -> InMemoryRateLimiter | None:
        return build_rate_limiter(self.config.security)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            rate_limiter=self.rate_limiter,
        )

    @cached_property
    def protected_controller(self) -> ProtectedController:
        return ProtectedController(auth_gate=self.auth_gate)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
