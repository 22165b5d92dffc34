"""Tests for profile updates, user statistics and user event subscribers."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from src.core.domain.events import EventBus
from src.modules.expenses.domain.entities import Expense
from src.modules.users.application.commands import UpdateProfileCommand
from src.modules.users.application.handlers import UpdateProfileHandler
from src.modules.users.application.query_service import UserQueryService
from src.modules.users.application.stats_service import UserStatsService
from src.modules.users.domain.entities import User
from src.modules.users.domain.events import UserCreatedEvent, UserProfileUpdatedEvent
from src.modules.users.domain.exceptions import UserNotFoundError
from src.modules.users.infrastructure.event_handlers import (
    register_user_event_handlers,
)
from tests.fakes import InMemoryExpenseRepository, InMemoryUserRepository

pytestmark = pytest.mark.anyio


class TestProfile:
    async def test_update_profile_changes_display_name(self):
        user = User(id=1, email="a@example.com")
        repository = InMemoryUserRepository({1: user})

        updated = await UpdateProfileHandler(repository).handle(
            UpdateProfileCommand(user_id=1, display_name="Alice")
        )

        assert updated.display_name == "Alice"
        events = updated.get_domain_events()
        assert len(events) == 1
        assert isinstance(events[0], UserProfileUpdatedEvent)
        assert events[0].updated_fields == ["display_name"]

    async def test_unchanged_profile_emits_nothing(self):
        user = User(id=1, email="a@example.com", display_name="Alice")
        repository = InMemoryUserRepository({1: user})

        updated = await UpdateProfileHandler(repository).handle(
            UpdateProfileCommand(user_id=1, display_name="Alice")
        )

        assert updated.get_domain_events() == []

    async def test_missing_user_is_not_found(
        self, user_repository: InMemoryUserRepository
    ):
        with pytest.raises(UserNotFoundError):
            await UpdateProfileHandler(user_repository).handle(
                UpdateProfileCommand(user_id=42, display_name="Ghost")
            )
        with pytest.raises(UserNotFoundError):
            await UserQueryService(user_repository).get_profile(42)


class TestUserStats:
    async def test_empty_history(self, expense_repository: InMemoryExpenseRepository):
        stats = await UserStatsService(expense_repository).get_stats(
            1, today=date(2024, 5, 20)
        )

        assert stats.model_dump() == {
            "total_expenses": 0,
            "total_amount": 0.0,
            "average_amount": 0.0,
            "categories_used": 0,
            "monthly_total": 0.0,
        }

    async def test_totals_and_month_to_date(
        self, expense_repository: InMemoryExpenseRepository
    ):
        for amount, day, category in [
            ("10", date(2024, 4, 30), "Food"),
            ("20", date(2024, 5, 1), "Food"),
            ("30", date(2024, 5, 19), "Transport"),
        ]:
            await expense_repository.create(
                Expense(
                    user_id=1,
                    title="x",
                    amount=Decimal(amount),
                    category=category,
                    expense_date=day,
                )
            )

        stats = await UserStatsService(expense_repository).get_stats(
            1, today=date(2024, 5, 20)
        )

        assert stats.total_expenses == 3
        assert stats.total_amount == 60.0
        assert stats.average_amount == 20.0
        assert stats.categories_used == 2
        assert stats.monthly_total == 50.0


class TestUserEventHandlers:
    async def test_registration_is_logged_as_business_event(self):
        bus = EventBus()
        register_user_event_handlers(bus)
        register_user_event_handlers(bus)

        with patch(
            "src.modules.users.infrastructure.event_handlers.BusinessEvents"
        ) as business_events:
            await bus.publish(UserCreatedEvent(user_id=1, email="a@example.com"))

        business_events.user_registered.assert_called_once_with(
            user_id=1, email="a@example.com"
        )
