from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.errors import DomainError
from ...domain.ports.security import TokenService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LogoutResult:
    success: bool
    error: Optional[DomainError] = None


class LogoutUseCase:
    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    async def execute(self, access_token: str, refresh_token: Optional[str] = None) -> LogoutResult:
        try:
            self._tokens.revoke_token(access_token)
            if refresh_token:
                self._tokens.revoke_token(refresh_token)
        except DomainError as exc:
            return LogoutResult(success=False, error=exc)
        except Exception:
            logger.exception("Unexpected error during logout")
            return LogoutResult(success=False, error=DomainError("Logout failed"))
        return LogoutResult(success=True)
