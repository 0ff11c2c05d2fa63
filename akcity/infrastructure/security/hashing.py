"""Password hashing backed by bcrypt."""

from __future__ import annotations

import asyncio
import logging

import bcrypt

from ...domain.errors import HashingError
from ...domain.ports.security import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)


class BcryptHashService:
    """Salted one-way hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 12) -> None:
        if rounds < 4 or rounds > 31:
            raise RuntimeError("BCRYPT_ROUNDS must be between 4 and 31.")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._hash_sync, plaintext)

    async def compare(self, plaintext: str, hashed: str) -> bool:
        return await asyncio.to_thread(self._compare_sync, plaintext, hashed)

    def _hash_sync(self, plaintext: str) -> str:
        try:
            encoded = plaintext.encode("utf-8")
            if len(encoded) > MAX_PASSWORD_BYTES:
                raise ValueError("password too long")
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except (ValueError, TypeError, AttributeError):
            logger.warning("Password hashing failed")
            raise HashingError("Failed to hash password") from None

    def _compare_sync(self, plaintext: str, hashed: str) -> bool:
        try:
            encoded = plaintext.encode("utf-8")
            if len(encoded) > MAX_PASSWORD_BYTES:
                return False
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            logger.warning("Password comparison failed")
            raise HashingError("Failed to compare password") from None
