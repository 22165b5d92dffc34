"""Per-user spending statistics."""

from datetime import date

import structlog

from src.core.domain.base_entity import utc_now
from src.modules.expenses.domain.repository import ExpenseRepository
from src.modules.users.application.models import UserStatsData

logger = structlog.get_logger(__name__)


class UserStatsService:
    """Summarize a user's expenses: all-time totals plus the current month."""

    def __init__(self, expense_repository: ExpenseRepository):
        self.expense_repository = expense_repository

    async def get_stats(self, user_id: int, today: date | None = None) -> UserStatsData:
        current = today or utc_now().date()
        month_start = current.replace(day=1)

        summary = await self.expense_repository.summarize(
            user_id=user_id, month_start=month_start
        )
        logger.debug(
            "user_stats_computed",
            user_id=user_id,
            month_start=month_start.isoformat(),
            total_expenses=summary.total_expenses,
        )
        return UserStatsData(
            total_expenses=summary.total_expenses,
            total_amount=float(summary.total_amount),
            average_amount=float(summary.average_amount),
            categories_used=summary.categories_used,
            monthly_total=float(summary.monthly_total),
        )
