"""Pytest fixtures for API integration tests.

Each test gets its own application backed by a SQLite file under
``tmp_path``, with the cheapest bcrypt cost and a generous auth rate limit
unless a test asks otherwise.
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Iterator, List

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from akcity.core.app_factory import create_application

STRONG_PASSWORD = "Abcdef1!"


@pytest.fixture
def build_app(tmp_path, monkeypatch) -> Iterator[Callable[..., FastAPI]]:
    """Factory for test applications; keyword arguments override environment variables."""
    created: List[FastAPI] = []

    def factory(**env: str) -> FastAPI:
        values = {
            "DATABASE_PATH": str(tmp_path / "api.db"),
            "BCRYPT_ROUNDS": "4",
            "JWT_SECRET": "api-test-access-secret-0123456789abcdef",
            "JWT_REFRESH_SECRET": "api-test-refresh-secret-0123456789abcdef",
            "AUTH_RATE_LIMIT_MAX": "1000",
            "SMTP_HOST": "",
        }
        values.update(env)
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        app = create_application()
        created.append(app)
        return app

    yield factory

    for app in created:
        app.state.container.close()


@pytest.fixture
def app(build_app: Callable[..., FastAPI]) -> FastAPI:
    return build_app()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test client.

    Args:
        app: The test app fixture.

    Yields:
        AsyncClient configured for the test app.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def registration(email: str, role: str = "worker", **overrides: Any) -> Dict[str, Any]:
    body = {
        "name": "Jane Doe",
        "email": email,
        "password": STRONG_PASSWORD,
        "phone": "+15551234567",
        "role": role,
    }
    body.update(overrides)
    return body


@pytest.fixture
def sign_up(client: AsyncClient) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Register and log in; the returned ``data`` carries ready ``headers`` for bearer auth."""

    async def factory(email: str, role: str = "worker") -> Dict[str, Any]:
        response = await client.post("/api/v1/auth/register", json=registration(email, role))
        assert response.status_code == 201, response.text
        response = await client.post("/api/v1/auth/login", json={"email": email, "password": STRONG_PASSWORD})
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        data["headers"] = {"Authorization": f"Bearer {data['access_token']}"}
        return data

    return factory
