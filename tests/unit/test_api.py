"""API scenarios driven through the ASGI app with in-memory stores."""

from urllib.parse import parse_qs, urlsplit

import pytest
from httpx import AsyncClient

from src.core.interfaces.http.rate_limiting import limiter
from tests.fakes import RecordingNotifier

pytestmark = pytest.mark.anyio


async def _sign_in(client: AsyncClient, email: str = "a@example.com") -> str:
    response = await client.post("/api/auth/magic-link", json={"email": email})
    link = response.json()["data"]["magic_link"]
    token = parse_qs(urlsplit(link).query)["token"][0]
    response = await client.get("/api/auth/verify", params={"token": token})
    return response.json()["data"]["token"]


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestAuthFlow:
    """Magic link sign-in over HTTP."""

    async def test_issue_redeem_and_reuse(
        self, async_client: AsyncClient, notifier: RecordingNotifier
    ):
        response = await async_client.post(
            "/api/auth/magic-link", json={"email": "a@example.com"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["success"] is True
        assert data["message"] == "Magic link sent to your email"
        link = data["magic_link"]
        token = parse_qs(urlsplit(link).query)["token"][0]
        assert notifier.sent[0][1] == link

        response = await async_client.get("/api/auth/verify", params={"token": token})
        assert response.status_code == 200
        session = response.json()["data"]
        assert session["user"]["email"] == "a@example.com"
        assert session["token"]
        assert session["token_type"] == "bearer"

        response = await async_client.get("/api/auth/verify", params={"token": token})
        assert response.status_code == 400
        assert response.json() == {
            "error": {
                "code": "INVALID_OR_EXPIRED_TOKEN",
                "message": "Invalid or expired magic link",
            }
        }

    async def test_invalid_email_is_a_validation_error(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/magic-link", json={"email": "not-an-email"}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"][0]["field"] == "email"

    async def test_missing_token_is_rejected(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/verify")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "TOKEN_REQUIRED"

    async def test_delivery_fallback_still_succeeds(
        self, async_client: AsyncClient, notifier: RecordingNotifier
    ):
        notifier.available = False

        response = await async_client.post(
            "/api/auth/magic-link", json={"email": "a@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["magic_link"]

    async def test_magic_link_requests_are_rate_limited(
        self,
        async_client: AsyncClient,
        notifier: RecordingNotifier,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr(limiter, "enabled", True)

        for _ in range(5):
            response = await async_client.post(
                "/api/auth/magic-link", json={"email": "a@example.com"}
            )
            assert response.status_code == 200

        response = await async_client.post(
            "/api/auth/magic-link", json={"email": "b@example.com"}
        )

        assert response.status_code == 429
        assert response.json() == {
            "error": {
                "code": "RATE_LIMITED",
                "message": "Too many requests, please try again later",
            }
        }
        assert response.headers["retry-after"] == "900"
        assert len(notifier.sent) == 5

    async def test_me_requires_credential(self, async_client: AsyncClient):
        missing = await async_client.get("/api/auth/me")
        invalid = await async_client.get("/api/auth/me", headers=_bearer("garbage"))

        assert missing.status_code == 401
        assert missing.json()["error"]["code"] == "CREDENTIAL_MISSING"
        assert missing.headers["www-authenticate"] == "Bearer"
        assert invalid.status_code == 403
        assert invalid.json()["error"]["code"] == "INVALID_OR_EXPIRED_CREDENTIAL"

    async def test_me_and_logout(self, async_client: AsyncClient):
        token = await _sign_in(async_client)

        me = await async_client.get("/api/auth/me", headers=_bearer(token))
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "a@example.com"

        logout = await async_client.post("/api/auth/logout")
        assert logout.status_code == 200
        assert logout.json()["data"]["success"] is True


class TestProfileApi:
    async def test_get_and_update_profile(self, async_client: AsyncClient):
        token = await _sign_in(async_client)

        response = await async_client.put(
            "/api/users/profile",
            json={"display_name": "  Alice  "},
            headers=_bearer(token),
        )
        assert response.status_code == 200
        assert response.json()["data"]["display_name"] == "Alice"

        response = await async_client.get("/api/users/profile", headers=_bearer(token))
        assert response.json()["data"]["display_name"] == "Alice"

        response = await async_client.put(
            "/api/users/profile", json={"display_name": "A"}, headers=_bearer(token)
        )
        assert response.status_code == 400


class TestExpensesApi:
    """Expense CRUD over HTTP."""

    async def test_crud_and_ownership(self, async_client: AsyncClient):
        alice = _bearer(await _sign_in(async_client, "alice@example.com"))
        bob = _bearer(await _sign_in(async_client, "bob@example.com"))

        response = await async_client.post(
            "/api/expenses",
            json={"title": "Lunch", "amount": 12.5, "date": "2024-05-01"},
            headers=alice,
        )
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["category"] == "Other"
        assert created["description"] == ""
        assert created["amount"] == 12.5
        assert created["date"] == "2024-05-01"
        expense_url = f"/api/expenses/{created['id']}"

        assert (await async_client.get(expense_url, headers=bob)).status_code == 404

        response = await async_client.put(
            expense_url,
            json={
                "title": "Dinner",
                "amount": 30,
                "date": "2024-05-02",
                "category": "Food",
            },
            headers=alice,
        )
        assert response.status_code == 200
        assert response.json()["data"]["category"] == "Food"

        response = await async_client.get("/api/expenses", headers=alice)
        body = response.json()
        assert body["meta"] == {"total": 1, "page": 1, "page_size": 10, "total_pages": 1}
        assert body["data"][0]["title"] == "Dinner"

        categories = await async_client.get("/api/expenses/categories", headers=alice)
        assert categories.json()["data"] == ["Food"]

        stats = await async_client.get("/api/expenses/stats", headers=alice)
        assert stats.status_code == 200
        assert set(stats.json()["data"]) == {"monthly_by_category", "recent_trend"}

        user_stats = await async_client.get("/api/users/stats", headers=alice)
        assert user_stats.json()["data"]["total_expenses"] == 1

        assert (await async_client.delete(expense_url, headers=bob)).status_code == 404
        assert (await async_client.delete(expense_url, headers=alice)).status_code == 200
        response = await async_client.get(expense_url, headers=alice)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_invalid_payloads(self, async_client: AsyncClient):
        headers = _bearer(await _sign_in(async_client))

        negative = await async_client.post(
            "/api/expenses",
            json={"title": "Refund", "amount": -5, "date": "2024-05-01"},
            headers=headers,
        )
        bad_sort = await async_client.get(
            "/api/expenses", params={"sort_by": "colour"}, headers=headers
        )
        bad_range = await async_client.get(
            "/api/expenses",
            params={"start_date": "2024-05-10", "end_date": "2024-05-01"},
            headers=headers,
        )

        assert negative.status_code == 400
        assert bad_sort.status_code == 400
        assert bad_range.status_code == 400
        assert bad_range.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_expenses_require_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/expenses")

        assert response.status_code == 401


async def test_root(async_client: AsyncClient):
    response = await async_client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/api/docs"
