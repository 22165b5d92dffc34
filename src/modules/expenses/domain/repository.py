"""Expense repository interface."""

from abc import abstractmethod
from datetime import date

from src.core.domain.repository import BaseRepository
from src.modules.expenses.domain.entities import (
    CategoryTotal,
    DailyTotal,
    Expense,
    ExpenseQuery,
    ExpenseSummary,
)


class ExpenseRepository(BaseRepository[Expense]):
    """Expense repository interface.

    Every read is scoped to one user; soft-deleted rows are invisible.
    """

    @abstractmethod
    async def get_for_user(self, expense_id: int, user_id: int) -> Expense | None:
        pass

    @abstractmethod
    async def delete(self, expense: Expense) -> bool:
        """Soft-delete an expense."""
        pass

    @abstractmethod
    async def list_by_user(
        self, user_id: int, query: ExpenseQuery
    ) -> tuple[list[Expense], int]:
        """Return one page of matching expenses and the total match count."""
        pass

    @abstractmethod
    async def list_categories(self, user_id: int) -> list[str]:
        """Distinct categories in use, sorted."""
        pass

    @abstractmethod
    async def totals_by_category(
        self, user_id: int, since: date
    ) -> list[CategoryTotal]:
        """Per-category totals from ``since`` on, largest total first."""
        pass

    @abstractmethod
    async def daily_totals(self, user_id: int, since: date) -> list[DailyTotal]:
        """Per-day totals from ``since`` on, oldest day first."""
        pass

    @abstractmethod
    async def summarize(self, user_id: int, month_start: date) -> ExpenseSummary:
        pass
