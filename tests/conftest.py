"""Shared fixtures: in-memory storage, fast bcrypt and JWT services."""

from __future__ import annotations

from typing import Callable, Iterator

import pytest

from akcity.domain.models import User, UserRole
from akcity.infrastructure.persistence.sqlite import SQLiteDatabase
from akcity.infrastructure.repositories.project_repository import SQLiteProjectRepository
from akcity.infrastructure.repositories.task_repository import SQLiteTaskRepository
from akcity.infrastructure.repositories.user_repository import SQLiteUserRepository
from akcity.infrastructure.security.hashing import BcryptHashService
from akcity.infrastructure.security.revocation import InMemoryTokenRevocationStore
from akcity.infrastructure.security.tokens import JwtTokenService

ACCESS_SECRET = "unit-test-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-test-refresh-secret-0123456789abcdef"


@pytest.fixture
def database() -> Iterator[SQLiteDatabase]:
    """Fresh in-memory database per test."""
    db = SQLiteDatabase(":memory:")
    yield db
    db.close()


@pytest.fixture
def user_repository(database: SQLiteDatabase) -> SQLiteUserRepository:
    return SQLiteUserRepository(database)


@pytest.fixture
def project_repository(database: SQLiteDatabase) -> SQLiteProjectRepository:
    return SQLiteProjectRepository(database)


@pytest.fixture
def task_repository(database: SQLiteDatabase) -> SQLiteTaskRepository:
    return SQLiteTaskRepository(database)


@pytest.fixture
def hash_service() -> BcryptHashService:
    """Lowest bcrypt cost so the suite stays fast."""
    return BcryptHashService(rounds=4)


@pytest.fixture
def revocation_store() -> InMemoryTokenRevocationStore:
    return InMemoryTokenRevocationStore()


@pytest.fixture
def token_service(revocation_store: InMemoryTokenRevocationStore) -> JwtTokenService:
    return JwtTokenService(ACCESS_SECRET, REFRESH_SECRET, revocation_store=revocation_store)


@pytest.fixture
def make_user(user_repository: SQLiteUserRepository) -> Callable[..., User]:
    """Persist a user with a placeholder hash; override any field by keyword."""
    counter = {"value": 0}

    def factory(**overrides) -> User:
        counter["value"] += 1
        fields = {
            "name": f"User {counter['value']}",
            "email": f"user{counter['value']}@akcity.io",
            "password_hash": "not-a-real-hash",
            "phone": "+1 555 0100",
            "role": UserRole.WORKER,
        }
        fields.update(overrides)
        return user_repository.create(User.create(**fields))

    return factory
