"""Unit tests for AuthenticateUserUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from akcity.application.use_cases.authenticate_user import AuthenticateUserRequest, AuthenticateUserUseCase
from akcity.application.use_cases.create_user import CreateUserRequest, CreateUserUseCase
from akcity.domain.errors import AccountNotActiveError, HashingError, InvalidCredentialsError, ValidationError
from akcity.domain.models import User
from akcity.infrastructure.repositories.user_repository import SQLiteUserRepository
from akcity.infrastructure.security.hashing import BcryptHashService
from akcity.infrastructure.security.tokens import JwtTokenService


@pytest_asyncio.fixture
async def jane(user_repository: SQLiteUserRepository, hash_service: BcryptHashService) -> User:
    result = await CreateUserUseCase(user_repository, hash_service, MagicMock()).execute(
        CreateUserRequest(
            name="Jane Doe",
            email="jane@x.com",
            password="Abcdef1!",
            phone="+15551234567",
            role="worker",
        )
    )
    return result.user


@pytest.fixture
def use_case(
    user_repository: SQLiteUserRepository, hash_service: BcryptHashService, token_service: JwtTokenService
) -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(user_repository, hash_service, token_service)


class TestAuthenticateUser:
    """Tests for the login flow."""

    @pytest.mark.asyncio
    async def test_correct_password_returns_tokens(
        self,
        jane: User,
        use_case: AuthenticateUserUseCase,
        token_service: JwtTokenService,
        user_repository: SQLiteUserRepository,
    ) -> None:
        result = await use_case.execute(AuthenticateUserRequest(email="JANE@x.com", password="Abcdef1!"))

        assert result.success is True
        assert result.user.id == jane.id
        access = token_service.verify_access_token(result.access_token)
        assert (access.user_id, access.email, access.role) == (jane.id, "jane@x.com", "worker")
        refresh = token_service.verify_refresh_token(result.refresh_token)
        assert refresh.user_id == jane.id
        assert refresh.role is None
        assert user_repository.find_by_id(jane.id).last_login is not None

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, jane: User, use_case: AuthenticateUserUseCase
    ) -> None:
        wrong_password = await use_case.execute(AuthenticateUserRequest(email="jane@x.com", password="Abcdef1?"))
        unknown_email = await use_case.execute(AuthenticateUserRequest(email="john@x.com", password="Abcdef1!"))

        for result in (wrong_password, unknown_email):
            assert result.success is False
            assert isinstance(result.error, InvalidCredentialsError)
            assert result.message == "Invalid credentials"
            assert result.access_token is None

    @pytest.mark.asyncio
    async def test_inactive_account(
        self, jane: User, use_case: AuthenticateUserUseCase, user_repository: SQLiteUserRepository
    ) -> None:
        jane.suspend()
        user_repository.update(jane)
        result = await use_case.execute(AuthenticateUserRequest(email="jane@x.com", password="Abcdef1!"))
        assert isinstance(result.error, AccountNotActiveError)

    @pytest.mark.asyncio
    async def test_missing_input(self, use_case: AuthenticateUserUseCase) -> None:
        result = await use_case.execute(AuthenticateUserRequest(email="", password=""))
        assert isinstance(result.error, ValidationError)

    @pytest.mark.asyncio
    async def test_hashing_failure_is_generic(
        self, jane: User, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        hasher = MagicMock()
        hasher.compare = AsyncMock(side_effect=HashingError())
        result = await AuthenticateUserUseCase(user_repository, hasher, token_service).execute(
            AuthenticateUserRequest(email="jane@x.com", password="Abcdef1!")
        )
        assert result.success is False
        assert result.message == "Authentication failed"
        assert not isinstance(result.error, HashingError)

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_a_comparison(
        self, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        hasher = MagicMock()
        hasher.hash = AsyncMock(return_value="$2b$04$placeholder")
        hasher.compare = AsyncMock(return_value=False)
        use_case = AuthenticateUserUseCase(user_repository, hasher, token_service)

        for _ in range(2):
            result = await use_case.execute(AuthenticateUserRequest(email="john@x.com", password="Abcdef1!"))
            assert isinstance(result.error, InvalidCredentialsError)

        assert hasher.compare.await_count == 2
        hasher.compare.assert_awaited_with("Abcdef1!", "$2b$04$placeholder")
        hasher.hash.assert_awaited_once()
