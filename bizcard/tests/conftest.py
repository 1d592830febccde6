from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from bizcard.app import create_app
from bizcard.application.services.session_tokens import JwtSessionTokenService
from bizcard.shared.config import AppConfig
from bizcard.tests.fakes import (
    TEST_SECRET,
    DeterministicHasher,
    InMemoryUserRepository,
    MutableClock,
)


@pytest.fixture()
def app_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'bizcard.db'}")
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "0")
    return AppConfig()  # type: ignore[call-arg]


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["bizcard.container"].engine.dispose()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture()
def token_service(clock: MutableClock) -> JwtSessionTokenService:
    return JwtSessionTokenService(TEST_SECRET, clock=clock)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()
