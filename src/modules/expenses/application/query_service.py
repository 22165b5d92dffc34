"""Expense query service."""

from datetime import date, timedelta

from src.core.domain.base_entity import utc_now
from src.modules.expenses.application.models import (
    CategoryTotalData,
    DailyTotalData,
    ExpenseData,
    ExpenseListData,
    ExpenseStatsData,
)
from src.modules.expenses.domain.entities import ExpenseQuery
from src.modules.expenses.domain.exceptions import (
    ExpenseNotFoundError,
    InvalidDateRangeError,
)
from src.modules.expenses.domain.repository import ExpenseRepository


class ExpenseQueryService:
    """Read-side views over a user's expenses."""

    def __init__(self, expense_repository: ExpenseRepository, trend_days: int = 7):
        self.expense_repository = expense_repository
        self.trend_days = trend_days

    async def get_expense(self, user_id: int, expense_id: int) -> ExpenseData:
        expense = await self.expense_repository.get_for_user(expense_id, user_id)
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        return ExpenseData.from_entity(expense)

    async def list_expenses(self, user_id: int, query: ExpenseQuery) -> ExpenseListData:
        if query.start_date and query.end_date and query.start_date > query.end_date:
            raise InvalidDateRangeError()

        search = query.search.strip() if query.search else None
        category = query.category.strip() if query.category else None
        query = query.model_copy(
            update={"search": search or None, "category": category or None}
        )

        expenses, total = await self.expense_repository.list_by_user(user_id, query)
        return ExpenseListData(
            items=[ExpenseData.from_entity(expense) for expense in expenses],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    async def list_categories(self, user_id: int) -> list[str]:
        return await self.expense_repository.list_categories(user_id)

    async def get_stats(self, user_id: int, today: date | None = None) -> ExpenseStatsData:
        """Current-month totals per category and the recent daily trend."""
        current = today or utc_now().date()
        month_start = current.replace(day=1)
        trend_since = current - timedelta(days=self.trend_days)

        by_category = await self.expense_repository.totals_by_category(
            user_id, since=month_start
        )
        trend = await self.expense_repository.daily_totals(user_id, since=trend_since)

        return ExpenseStatsData(
            monthly_by_category=[
                CategoryTotalData(
                    category=row.category, total=float(row.total), count=row.count
                )
                for row in by_category
            ],
            recent_trend=[
                DailyTotalData(date=row.day.isoformat(), daily_total=float(row.total))
                for row in trend
            ],
        )
