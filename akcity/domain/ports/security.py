from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Claims carried by access and refresh tokens."""

    user_id: str
    email: str
    role: Optional[str] = None


class PasswordHasher(Protocol):
    async def hash(self, plaintext: str) -> str:
        ...

    async def compare(self, plaintext: str, hashed: str) -> bool:
        ...


class TokenService(Protocol):
    def generate_access_token(self, payload: TokenPayload) -> str:
        ...

    def generate_refresh_token(self, payload: TokenPayload) -> str:
        ...

    def verify_access_token(self, token: str) -> TokenPayload:
        ...

    def verify_refresh_token(self, token: str) -> TokenPayload:
        ...

    def revoke_token(self, token: str) -> None:
        ...


class TokenRevocationStore(Protocol):
    """Denylist of token ids, kept until the token would have expired anyway."""

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        ...

    def is_revoked(self, token_id: str) -> bool:
        ...
