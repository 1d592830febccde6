# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bizcard.domain.users.entities import User as DomainUser
from bizcard.domain.users.exceptions import StoreUnavailableError, UserAlreadyExistsError
from bizcard.domain.users.repositories import UserRepository
from bizcard.infrastructure.db.models import User
from bizcard.infrastructure.db.session import SessionFactory, session_scope
from bizcard.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    created_at = row.created_at
    # SQLite drops tzinfo on the way back
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return DomainUser(
        id=row.id,
        identifier=row.identifier,
        password_hash=row.password_hash,
        created_at=created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def find_by_identifier(self, identifier: str) -> DomainUser | None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.scalars(
                    select(User).where(User.identifier == identifier)
                ).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.error(f"users.find: store error {type(exc).__name__} operation=find_by_identifier")
            raise StoreUnavailableError("find_by_identifier") from exc

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope(self._session_factory) as session:
                row = User(
                    identifier=user.identifier,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info("users.add: identifier already taken")
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.add: store error {type(exc).__name__} operation=add")
            raise StoreUnavailableError("add") from exc
