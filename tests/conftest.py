"""
pytest configuration and shared fixtures.

Everything under unit/ runs without external services: repositories are
in-memory fakes and the API is driven through ``httpx.ASGITransport``.

Usage:
    pytest tests/unit/
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.infrastructure.security.jwt import JWTTokenService
from tests.fakes import (
    InMemoryExpenseRepository,
    InMemoryMagicLinkRepository,
    InMemoryUserRepository,
    RecordingNotifier,
)

TEST_SECRET_KEY = "test-secret-key-for-testing-only"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def token_service() -> JWTTokenService:
    return JWTTokenService(secret_key=TEST_SECRET_KEY, expire_minutes=60)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def magic_link_repository() -> InMemoryMagicLinkRepository:
    return InMemoryMagicLinkRepository()


@pytest.fixture
def expense_repository() -> InMemoryExpenseRepository:
    return InMemoryExpenseRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def async_client(
    user_repository: InMemoryUserRepository,
    magic_link_repository: InMemoryMagicLinkRepository,
    expense_repository: InMemoryExpenseRepository,
    notifier: RecordingNotifier,
    token_service: JWTTokenService,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with every store replaced by a fake."""
    from main import app
    from src.core.infrastructure.security import jwt as infra_jwt
    from src.core.interfaces.http.rate_limiting import limiter
    from src.modules.expenses.application import dependencies as expenses_app_deps
    from src.modules.users.application import dependencies as users_app_deps

    overrides = {
        users_app_deps.get_user_repository: lambda: user_repository,
        users_app_deps.get_magic_link_repository: lambda: magic_link_repository,
        users_app_deps.get_magic_link_notifier: lambda: notifier,
        users_app_deps.get_token_service: lambda: token_service,
        infra_jwt.get_token_service: lambda: token_service,
        expenses_app_deps.get_expense_repository: lambda: expense_repository,
    }
    saved = dict(app.dependency_overrides)
    app.dependency_overrides.update(overrides)
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(saved)
