"""Expense entity-model mapper."""

from src.core.infrastructure.database.mapper import BaseMapper
from src.modules.expenses.domain.entities import Expense
from src.modules.expenses.infrastructure.models import ExpenseModel


class ExpenseMapper(BaseMapper[Expense, ExpenseModel]):
    def to_domain(self, model: ExpenseModel) -> Expense:
        return Expense(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            amount=model.amount,
            category=model.category,
            description=model.description,
            expense_date=model.expense_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
            is_deleted=model.is_deleted,
        )

    def to_model(self, entity: Expense) -> ExpenseModel:
        return ExpenseModel(
            id=entity.id,
            user_id=entity.user_id,
            title=entity.title,
            amount=entity.amount,
            category=entity.category,
            description=entity.description,
            expense_date=entity.expense_date,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            is_deleted=entity.is_deleted,
        )
