from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.errors import (
    AccountNotActiveError,
    DomainError,
    InvalidCredentialsError,
    ValidationError,
)
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.ports.security import PasswordHasher, TokenPayload, TokenService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthenticateUserRequest:
    email: str
    password: str


@dataclass(slots=True)
class AuthenticationResult:
    success: bool
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[DomainError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class AuthenticateUserUseCase:
    """Checks credentials and opens a session.

    An unknown e-mail and a wrong password produce the very same
    ``InvalidCredentialsError`` so the endpoint cannot be used to discover
    which addresses have accounts.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._users = user_repository
        self._hasher = hasher
        self._tokens = token_service
        self._dummy_hash: Optional[str] = None

    async def execute(self, request: AuthenticateUserRequest) -> AuthenticationResult:
        try:
            if not request.email or not request.password:
                raise ValidationError("Email and password are required")

            user = self._users.find_by_email(request.email.strip().lower())
            if user is None:
                await self._burn_comparison(request.password)
                raise InvalidCredentialsError()
            if not user.is_active:
                raise AccountNotActiveError()
            if not await self._hasher.compare(request.password, user.password):
                raise InvalidCredentialsError()

            user.update_last_login()
            self._users.update(user)

            access_token = self._tokens.generate_access_token(
                TokenPayload(user_id=user.id, email=user.email, role=user.role.value)
            )
            refresh_token = self._tokens.generate_refresh_token(
                TokenPayload(user_id=user.id, email=user.email)
            )
        except (ValidationError, InvalidCredentialsError, AccountNotActiveError) as exc:
            logger.info("Authentication rejected: %s", exc.code)
            return AuthenticationResult(success=False, error=exc)
        except Exception:
            logger.exception("Unexpected error during authentication")
            return AuthenticationResult(success=False, error=DomainError("Authentication failed"))

        logger.info("User %s authenticated", user.id)
        return AuthenticationResult(
            success=True,
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def _burn_comparison(self, password: str) -> None:
        # Unknown e-mails pay the same bcrypt cost as wrong passwords.
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash("akcity-unknown-account")
        await self._hasher.compare(password, self._dummy_hash)
