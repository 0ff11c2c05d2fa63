"""Unit tests for the bcrypt hash service."""

from __future__ import annotations

import pytest

from akcity.domain.errors import HashingError
from akcity.infrastructure.security.hashing import MAX_PASSWORD_BYTES, BcryptHashService


class TestBcryptHashService:
    """Tests for hashing and comparison."""

    @pytest.mark.asyncio
    async def test_hash_and_compare(self, hash_service: BcryptHashService) -> None:
        hashed = await hash_service.hash("Str0ng!Pass")
        assert hashed != "Str0ng!Pass"
        assert hashed.startswith("$2")
        assert await hash_service.compare("Str0ng!Pass", hashed) is True
        assert await hash_service.compare("str0ng!pass", hashed) is False

    @pytest.mark.asyncio
    async def test_hashes_are_salted(self, hash_service: BcryptHashService) -> None:
        first = await hash_service.hash("Str0ng!Pass")
        second = await hash_service.hash("Str0ng!Pass")
        assert first != second

    @pytest.mark.asyncio
    async def test_cost_factor_is_encoded(self) -> None:
        hashed = await BcryptHashService(rounds=5).hash("Str0ng!Pass")
        assert hashed.split("$")[2] == "05"

    @pytest.mark.asyncio
    async def test_overlong_password(self, hash_service: BcryptHashService) -> None:
        too_long = "a" * (MAX_PASSWORD_BYTES + 1)
        with pytest.raises(HashingError):
            await hash_service.hash(too_long)
        hashed = await hash_service.hash("a" * MAX_PASSWORD_BYTES)
        assert await hash_service.compare(too_long, hashed) is False

    @pytest.mark.asyncio
    async def test_malformed_hash(self, hash_service: BcryptHashService) -> None:
        with pytest.raises(HashingError):
            await hash_service.compare("Str0ng!Pass", "not-a-bcrypt-hash")

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_rounds_out_of_range(self, rounds: int) -> None:
        with pytest.raises(RuntimeError):
            BcryptHashService(rounds=rounds)
