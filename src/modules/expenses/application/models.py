"""Expense application data models."""

from datetime import date, datetime

from pydantic import BaseModel

from src.modules.expenses.domain.entities import Expense


class ExpenseData(BaseModel):
    id: int
    title: str
    amount: float
    category: str
    description: str
    expense_date: date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, expense: Expense) -> "ExpenseData":
        return cls(
            id=expense.id,
            title=expense.title,
            amount=float(expense.amount),
            category=expense.category,
            description=expense.description,
            expense_date=expense.expense_date,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )


class ExpenseListData(BaseModel):
    items: list[ExpenseData]
    total: int
    page: int
    page_size: int


class CategoryTotalData(BaseModel):
    category: str
    total: float
    count: int


class DailyTotalData(BaseModel):
    date: str
    daily_total: float


class ExpenseStatsData(BaseModel):
    monthly_by_category: list[CategoryTotalData]
    recent_trend: list[DailyTotalData]
