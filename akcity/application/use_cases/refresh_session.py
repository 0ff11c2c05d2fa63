from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.errors import (
    AccountNotActiveError,
    DomainError,
    TokenExpiredError,
    TokenInvalidError,
    ValidationError,
)
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.ports.security import TokenPayload, TokenService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefreshSessionResult:
    success: bool
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[DomainError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class RefreshSessionUseCase:
    """Exchanges a refresh token for a new access/refresh pair, rotating the old one out."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService) -> None:
        self._users = user_repository
        self._tokens = token_service

    async def execute(self, refresh_token: str) -> RefreshSessionResult:
        try:
            if not refresh_token:
                raise ValidationError("Refresh token is required")
            payload = self._tokens.verify_refresh_token(refresh_token)
            user = self._users.find_by_id(payload.user_id)
            if user is None:
                raise TokenInvalidError("Invalid refresh token")
            if not user.is_active:
                raise AccountNotActiveError()

            self._tokens.revoke_token(refresh_token)
            access_token = self._tokens.generate_access_token(
                TokenPayload(user_id=user.id, email=user.email, role=user.role.value)
            )
            new_refresh_token = self._tokens.generate_refresh_token(
                TokenPayload(user_id=user.id, email=user.email)
            )
        except (ValidationError, TokenExpiredError, TokenInvalidError, AccountNotActiveError) as exc:
            return RefreshSessionResult(success=False, error=exc)
        except Exception:
            logger.exception("Unexpected error while refreshing session")
            return RefreshSessionResult(success=False, error=DomainError("Failed to refresh session"))

        return RefreshSessionResult(
            success=True,
            user=user,
            access_token=access_token,
            refresh_token=new_refresh_token,
        )
