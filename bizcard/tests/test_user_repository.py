from __future__ import annotations

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy import func, select

from bizcard.application.use_cases.users.register_user import RegisterUserUseCase
from bizcard.domain.users.entities import User
from bizcard.domain.users.exceptions import StoreUnavailableError, UserAlreadyExistsError
from bizcard.infrastructure.db import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from bizcard.infrastructure.db import models
from bizcard.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from bizcard.shared.config import DatabaseConfig
from bizcard.tests.fakes import DeterministicHasher


def _database(url: str) -> DatabaseConfig:
    return DatabaseConfig(DATABASE_URL=url)  # type: ignore[call-arg]


@pytest.fixture()
def session_factory(tmp_path: Path) -> Iterator[SessionFactory]:
    engine = create_db_engine(_database(f"sqlite:///{tmp_path / 'users.db'}"))
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def repository(session_factory: SessionFactory) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session_factory)


def _user(identifier: str = "a@x.com", password_hash: str = "hashed:pw123") -> User:
    return User(id=0, identifier=identifier, password_hash=password_hash, created_at=datetime.now(UTC))


def _count_rows(session_factory: SessionFactory) -> int:
    with session_scope(session_factory) as session:
        return session.scalar(select(func.count(models.User.id))) or 0


def test_add_then_find(repository: SqlAlchemyUserRepository) -> None:
    stored = repository.add(_user())
    found = repository.find_by_identifier("a@x.com")

    assert stored.id > 0
    assert found is not None
    assert found.id == stored.id
    assert found.password_hash == "hashed:pw123"
    assert found.created_at.tzinfo is not None


def test_find_missing_returns_none(repository: SqlAlchemyUserRepository) -> None:
    assert repository.find_by_identifier("nobody@x.com") is None


def test_unique_constraint_maps_to_already_exists(
    repository: SqlAlchemyUserRepository, session_factory: SessionFactory
) -> None:
    repository.add(_user())

    with pytest.raises(UserAlreadyExistsError):
        repository.add(_user(password_hash="hashed:other"))

    found = repository.find_by_identifier("a@x.com")
    assert found is not None
    assert found.password_hash == "hashed:pw123"
    assert _count_rows(session_factory) == 1


def test_store_failure_is_reported_as_unavailable(tmp_path: Path) -> None:
    engine = create_db_engine(_database(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'users.db'}"))
    repository = SqlAlchemyUserRepository(create_session_factory(engine))

    with pytest.raises(StoreUnavailableError) as exc_info:
        repository.find_by_identifier("a@x.com")
    assert exc_info.value.code == "store_unavailable"
    assert exc_info.value.status == 500
    assert exc_info.value.operation == "find_by_identifier"
    assert "context" not in exc_info.value.to_dict()

    with pytest.raises(StoreUnavailableError):
        repository.add(_user())
    engine.dispose()


def test_concurrent_registration_hits_store_constraint(
    repository: SqlAlchemyUserRepository, session_factory: SessionFactory
) -> None:
    register = RegisterUserUseCase(users=repository, password_hasher=DeterministicHasher())

    def attempt(_: int) -> str:
        try:
            register.execute("a@x.com", "pw123")
        except UserAlreadyExistsError:
            return "exists"
        return "created"

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(8)))

    assert outcomes.count("created") == 1
    assert outcomes.count("exists") == 7
    assert _count_rows(session_factory) == 1
