"""Unit tests for RefreshSessionUseCase and LogoutUseCase."""

from __future__ import annotations

from typing import Callable

import pytest

from akcity.application.use_cases.logout import LogoutUseCase
from akcity.application.use_cases.refresh_session import RefreshSessionUseCase
from akcity.domain.errors import AccountNotActiveError, TokenExpiredError, TokenInvalidError, ValidationError
from akcity.domain.models import User, UserRole
from akcity.domain.ports.security import TokenPayload
from akcity.infrastructure.repositories.user_repository import SQLiteUserRepository
from akcity.infrastructure.security.tokens import JwtTokenService

ACCESS_SECRET = "unit-test-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-test-refresh-secret-0123456789abcdef"


@pytest.fixture
def user(make_user: Callable[..., User]) -> User:
    return make_user(role=UserRole.CHIEF_ENGINEER)


def refresh_for(token_service: JwtTokenService, user: User) -> str:
    return token_service.generate_refresh_token(TokenPayload(user_id=user.id, email=user.email))


class TestRefreshSession:
    """Tests for exchanging refresh tokens."""

    @pytest.mark.asyncio
    async def test_rotates_tokens(
        self, user: User, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        use_case = RefreshSessionUseCase(user_repository, token_service)
        old_refresh = refresh_for(token_service, user)

        result = await use_case.execute(old_refresh)

        assert result.success is True
        assert token_service.verify_access_token(result.access_token).role == "chief_engineer"
        assert token_service.verify_refresh_token(result.refresh_token).user_id == user.id
        with pytest.raises(TokenInvalidError):
            token_service.verify_refresh_token(old_refresh)

        replay = await use_case.execute(old_refresh)
        assert isinstance(replay.error, TokenInvalidError)

    @pytest.mark.asyncio
    async def test_access_token_is_refused(
        self, user: User, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        access = token_service.generate_access_token(TokenPayload(user_id=user.id, email=user.email))
        result = await RefreshSessionUseCase(user_repository, token_service).execute(access)
        assert isinstance(result.error, TokenInvalidError)

    @pytest.mark.asyncio
    async def test_expired_refresh_token(self, user: User, user_repository: SQLiteUserRepository) -> None:
        service = JwtTokenService(ACCESS_SECRET, REFRESH_SECRET, refresh_token_exp_days=-1)
        result = await RefreshSessionUseCase(user_repository, service).execute(refresh_for(service, user))
        assert isinstance(result.error, TokenExpiredError)

    @pytest.mark.asyncio
    async def test_deleted_user(
        self, user: User, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        token = refresh_for(token_service, user)
        user_repository.delete(user.id)
        result = await RefreshSessionUseCase(user_repository, token_service).execute(token)
        assert isinstance(result.error, TokenInvalidError)

    @pytest.mark.asyncio
    async def test_inactive_user(
        self, user: User, user_repository: SQLiteUserRepository, token_service: JwtTokenService
    ) -> None:
        user.deactivate()
        user_repository.update(user)
        result = await RefreshSessionUseCase(user_repository, token_service).execute(refresh_for(token_service, user))
        assert isinstance(result.error, AccountNotActiveError)

    @pytest.mark.asyncio
    async def test_empty_token(self, user_repository: SQLiteUserRepository, token_service: JwtTokenService) -> None:
        result = await RefreshSessionUseCase(user_repository, token_service).execute("")
        assert isinstance(result.error, ValidationError)


class TestLogout:
    """Tests for revoking a session."""

    @pytest.mark.asyncio
    async def test_revokes_both_tokens(self, user: User, token_service: JwtTokenService) -> None:
        access = token_service.generate_access_token(TokenPayload(user_id=user.id, email=user.email))
        refresh = refresh_for(token_service, user)

        result = await LogoutUseCase(token_service).execute(access, refresh)

        assert result.success is True
        with pytest.raises(TokenInvalidError):
            token_service.verify_access_token(access)
        with pytest.raises(TokenInvalidError):
            token_service.verify_refresh_token(refresh)

    @pytest.mark.asyncio
    async def test_invalid_token(self, token_service: JwtTokenService) -> None:
        result = await LogoutUseCase(token_service).execute("garbage")
        assert result.success is False
        assert isinstance(result.error, TokenInvalidError)
