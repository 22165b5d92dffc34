"""Expense database models."""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Numeric, String
from sqlmodel import Field

from src.core.infrastructure.database.base_model import BaseModel
from src.modules.expenses.domain.entities import DEFAULT_CATEGORY


class ExpenseModel(BaseModel, table=True):
    """Expense database model."""

    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expenses_user_id_expense_date", "user_id", "expense_date"),
        Index("ix_expenses_user_id_category", "user_id", "category"),
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    user_id: int = Field(
        foreign_key="users.id", ondelete="CASCADE", index=True, nullable=False
    )
    title: str = Field(sa_type=String(255), nullable=False)
    amount: Decimal = Field(sa_type=Numeric(10, 2), nullable=False)
    category: str = Field(default=DEFAULT_CATEGORY, sa_type=String(100), nullable=False)
    description: str = Field(default="", sa_type=String(1000), nullable=False)
    expense_date: date = Field(sa_type=Date, nullable=False)
