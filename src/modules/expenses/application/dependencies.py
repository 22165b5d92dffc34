"""Expense module application dependencies.

The repository stub is overridden in main.py.
"""

from typing import NoReturn

from fastapi import Depends

from src.core.config import settings
from src.modules.expenses.application.handlers import (
    CreateExpenseHandler,
    DeleteExpenseHandler,
    UpdateExpenseHandler,
)
from src.modules.expenses.application.query_service import ExpenseQueryService
from src.modules.expenses.domain.repository import ExpenseRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_expense_repository() -> ExpenseRepository:
    _missing_dependency("ExpenseRepository")


async def get_create_expense_handler(
    expense_repository: ExpenseRepository = Depends(get_expense_repository),
) -> CreateExpenseHandler:
    return CreateExpenseHandler(expense_repository)


async def get_update_expense_handler(
    expense_repository: ExpenseRepository = Depends(get_expense_repository),
) -> UpdateExpenseHandler:
    return UpdateExpenseHandler(expense_repository)


async def get_delete_expense_handler(
    expense_repository: ExpenseRepository = Depends(get_expense_repository),
) -> DeleteExpenseHandler:
    return DeleteExpenseHandler(expense_repository)


async def get_expense_query_service(
    expense_repository: ExpenseRepository = Depends(get_expense_repository),
) -> ExpenseQueryService:
    return ExpenseQueryService(
        expense_repository, trend_days=settings.STATS_RECENT_TREND_DAYS
    )
