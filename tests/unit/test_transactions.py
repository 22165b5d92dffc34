"""A failed commit must reach the caller before any credential leaves."""

from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from src.core.domain.base_entity import utc_now
from src.core.infrastructure.database.session import get_db_session
from src.modules.users.application import dependencies as users_app_deps
from src.modules.users.infrastructure import dependencies as users_infra_deps
from src.modules.users.infrastructure.models import MagicLinkModel

pytestmark = pytest.mark.anyio


class _Result:
    def __init__(self, model):
        self.model = model

    def scalar_one_or_none(self):
        return self.model


class CommitFailingSession:
    """Accepts every statement; the transaction fails when it commits."""

    def __init__(self, consumed: MagicLinkModel | None = None) -> None:
        self.consumed = consumed
        self.added: list = []

    def add(self, model) -> None:
        if model.id is None:
            model.id = len(self.added) + 1
        self.added.append(model)

    async def flush(self) -> None:
        pass

    async def refresh(self, model) -> None:
        pass

    async def execute(self, statement) -> _Result:
        return _Result(self.consumed)


def _override_session(app, session: CommitFailingSession) -> None:
    async def failing_session() -> AsyncGenerator[CommitFailingSession, None]:
        yield session
        raise OperationalError("COMMIT", {}, ConnectionError("connection lost"))

    app.dependency_overrides[get_db_session] = failing_session
    app.dependency_overrides[users_app_deps.get_magic_link_repository] = (
        users_infra_deps.get_magic_link_repository
    )


STORE_FAILURE = {
    "error": {"code": "STORE_FAILURE", "message": "An internal error occurred"}
}


class TestCommitFailure:
    async def test_redeem_returns_500_without_a_credential(
        self, async_client: AsyncClient
    ):
        from main import app

        now = utc_now()
        consumed = MagicLinkModel(
            id=7,
            email="a@example.com",
            token="tok",
            expires_at=now + timedelta(minutes=15),
            is_used=True,
            used_at=now,
        )
        _override_session(app, CommitFailingSession(consumed=consumed))

        response = await async_client.get("/api/auth/verify", params={"token": "tok"})

        assert response.status_code == 500
        assert response.json() == STORE_FAILURE

    async def test_issue_returns_500_without_a_link(self, async_client: AsyncClient):
        from main import app

        session = CommitFailingSession()
        _override_session(app, session)

        response = await async_client.post(
            "/api/auth/magic-link", json={"email": "a@example.com"}
        )

        assert response.status_code == 500
        assert response.json() == STORE_FAILURE
        assert isinstance(session.added[0], MagicLinkModel)
