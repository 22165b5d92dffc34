"""Expense module infrastructure dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.domain.events import get_event_bus
from src.core.infrastructure.database.session import get_db_session
from src.modules.expenses.infrastructure.mappers import ExpenseMapper
from src.modules.expenses.infrastructure.repositories import (
    PostgreSQLExpenseRepository,
)


def get_expense_mapper() -> ExpenseMapper:
    return ExpenseMapper()


async def get_expense_repository(
    session: AsyncSession = Depends(get_db_session, scope="function"),
    mapper: ExpenseMapper = Depends(get_expense_mapper),
) -> PostgreSQLExpenseRepository:
    return PostgreSQLExpenseRepository(session, mapper, get_event_bus())
