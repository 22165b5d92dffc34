"""Expense repository implementation."""

from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy import Select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.core.domain.events import EventBus
from src.core.infrastructure.database.event_aware_repository import EventAwareRepository
from src.modules.expenses.domain.entities import (
    CategoryTotal,
    DailyTotal,
    Expense,
    ExpenseQuery,
    ExpenseSortField,
    ExpenseSummary,
    SortOrder,
)
from src.modules.expenses.domain.exceptions import ExpenseNotFoundError
from src.modules.expenses.domain.repository import ExpenseRepository
from src.modules.expenses.infrastructure.mappers import ExpenseMapper
from src.modules.expenses.infrastructure.models import ExpenseModel

SORT_COLUMNS = {
    ExpenseSortField.DATE: ExpenseModel.expense_date,
    ExpenseSortField.AMOUNT: ExpenseModel.amount,
    ExpenseSortField.TITLE: ExpenseModel.title,
    ExpenseSortField.CATEGORY: ExpenseModel.category,
    ExpenseSortField.CREATED_AT: ExpenseModel.created_at,
}


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_expense_filters(statement: Select, user_id: int, query: ExpenseQuery) -> Select:
    """Scope ``statement`` to one user's live expenses matching ``query``."""
    statement = statement.where(
        ExpenseModel.user_id == user_id,
        col(ExpenseModel.is_deleted).is_(False),
    )
    if query.category:
        statement = statement.where(ExpenseModel.category == query.category)
    if query.start_date:
        statement = statement.where(col(ExpenseModel.expense_date) >= query.start_date)
    if query.end_date:
        statement = statement.where(col(ExpenseModel.expense_date) <= query.end_date)
    if query.search:
        pattern = f"%{escape_like(query.search)}%"
        statement = statement.where(
            or_(
                col(ExpenseModel.title).ilike(pattern, escape="\\"),
                col(ExpenseModel.description).ilike(pattern, escape="\\"),
            )
        )
    return statement


def build_list_statement(user_id: int, query: ExpenseQuery) -> Select:
    statement = select(
        ExpenseModel, func.count(ExpenseModel.id).over().label("total_count")
    )
    statement = apply_expense_filters(statement, user_id, query)

    sort_column = col(SORT_COLUMNS[query.sort_by])
    if query.sort_order == SortOrder.ASC:
        order = sort_column.asc()
    else:
        order = sort_column.desc()

    return (
        statement.order_by(order, col(ExpenseModel.id).desc())
        .offset(query.offset)
        .limit(query.page_size)
    )


class PostgreSQLExpenseRepository(EventAwareRepository[Expense], ExpenseRepository):
    """PostgreSQL expense repository implementation."""

    def __init__(
        self,
        session: AsyncSession,
        mapper: ExpenseMapper,
        event_publisher: EventBus,
    ):
        super().__init__(event_publisher)
        self.session = session
        self.mapper = mapper
        self.logger = logger

    async def get_by_id(self, expense_id: int) -> Expense | None:
        statement = select(ExpenseModel).where(
            ExpenseModel.id == expense_id,
            col(ExpenseModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def get_for_user(self, expense_id: int, user_id: int) -> Expense | None:
        statement = select(ExpenseModel).where(
            ExpenseModel.id == expense_id,
            ExpenseModel.user_id == user_id,
            col(ExpenseModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def create(self, expense: Expense) -> Expense:
        model = self.mapper.to_model(expense)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        await self._publish_events_from_entity(expense)
        return self.mapper.to_domain(model)

    async def update(self, expense: Expense) -> Expense:
        existing = await self.session.get(ExpenseModel, expense.id)
        if not existing or existing.is_deleted:
            raise ExpenseNotFoundError(expense.id)

        existing.title = expense.title
        existing.amount = expense.amount
        existing.category = expense.category
        existing.description = expense.description
        existing.expense_date = expense.expense_date
        existing.updated_at = expense.updated_at
        existing.is_deleted = expense.is_deleted

        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        await self._publish_events_from_entity(expense)
        return self.mapper.to_domain(existing)

    async def delete(self, expense: Expense) -> bool:
        existing = await self.session.get(ExpenseModel, expense.id)
        if not existing or existing.is_deleted:
            return False

        expense.mark_as_deleted()
        existing.is_deleted = True
        existing.updated_at = expense.updated_at
        self.session.add(existing)
        await self.session.flush()
        return True

    async def list_by_user(
        self, user_id: int, query: ExpenseQuery
    ) -> tuple[list[Expense], int]:
        result = await self.session.execute(build_list_statement(user_id, query))
        rows = result.all()

        if rows:
            total_count = rows[0].total_count
        elif query.page > 1:
            # Past the last page the window count has no row to ride on.
            count_statement = apply_expense_filters(
                select(func.count(ExpenseModel.id)), user_id, query
            )
            total_count = (await self.session.execute(count_statement)).scalar_one()
        else:
            total_count = 0

        models = [row.ExpenseModel for row in rows]
        return self.mapper.to_domain_list(models), total_count

    async def list_categories(self, user_id: int) -> list[str]:
        statement = (
            select(ExpenseModel.category)
            .where(
                ExpenseModel.user_id == user_id,
                col(ExpenseModel.is_deleted).is_(False),
            )
            .distinct()
            .order_by(ExpenseModel.category)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def totals_by_category(
        self, user_id: int, since: date
    ) -> list[CategoryTotal]:
        total = func.sum(ExpenseModel.amount).label("total")
        statement = (
            select(
                ExpenseModel.category,
                total,
                func.count(ExpenseModel.id).label("count"),
            )
            .where(
                ExpenseModel.user_id == user_id,
                col(ExpenseModel.is_deleted).is_(False),
                col(ExpenseModel.expense_date) >= since,
            )
            .group_by(ExpenseModel.category)
            .order_by(total.desc(), ExpenseModel.category)
        )
        result = await self.session.execute(statement)
        return [
            CategoryTotal(category=row.category, total=row.total, count=row.count)
            for row in result.all()
        ]

    async def daily_totals(self, user_id: int, since: date) -> list[DailyTotal]:
        statement = (
            select(
                ExpenseModel.expense_date,
                func.sum(ExpenseModel.amount).label("total"),
            )
            .where(
                ExpenseModel.user_id == user_id,
                col(ExpenseModel.is_deleted).is_(False),
                col(ExpenseModel.expense_date) >= since,
            )
            .group_by(ExpenseModel.expense_date)
            .order_by(ExpenseModel.expense_date)
        )
        result = await self.session.execute(statement)
        return [
            DailyTotal(day=row.expense_date, total=row.total) for row in result.all()
        ]

    async def summarize(self, user_id: int, month_start: date) -> ExpenseSummary:
        monthly = func.coalesce(
            func.sum(ExpenseModel.amount).filter(
                col(ExpenseModel.expense_date) >= month_start
            ),
            0,
        )
        statement = select(
            func.count(ExpenseModel.id).label("total_expenses"),
            func.coalesce(func.sum(ExpenseModel.amount), 0).label("total_amount"),
            func.coalesce(func.avg(ExpenseModel.amount), 0).label("average_amount"),
            func.count(func.distinct(ExpenseModel.category)).label("categories_used"),
            monthly.label("monthly_total"),
        ).where(
            ExpenseModel.user_id == user_id,
            col(ExpenseModel.is_deleted).is_(False),
        )
        row = (await self.session.execute(statement)).one()
        return ExpenseSummary(
            total_expenses=row.total_expenses,
            total_amount=Decimal(row.total_amount),
            average_amount=Decimal(row.average_amount),
            categories_used=row.categories_used,
            monthly_total=Decimal(row.monthly_total),
        )
