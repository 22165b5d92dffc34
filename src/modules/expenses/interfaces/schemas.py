"""Expense API schemas."""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.modules.expenses.application.models import ExpenseData


class CreateExpenseRequest(BaseModel):
    """Create an expense."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Lunch",
                "amount": 12.5,
                "category": "Food",
                "description": "Team lunch",
                "date": "2024-05-01",
            }
        }
    )

    title: str = Field(..., min_length=1, max_length=255, description="Title")
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    category: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=1000)
    date: datetime.date = Field(..., description="Expense date (YYYY-MM-DD)")

    @field_validator("title", "category", "description", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("category")
    @classmethod
    def _blank_category(cls, value: str | None) -> str | None:
        return value or None


class UpdateExpenseRequest(CreateExpenseRequest):
    """Replace an expense; omitted category/description are kept."""


class ExpenseResponse(BaseModel):
    id: int
    title: str
    amount: float
    category: str
    description: str
    date: datetime.date
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @classmethod
    def from_data(cls, data: ExpenseData) -> "ExpenseResponse":
        return cls(
            id=data.id,
            title=data.title,
            amount=data.amount,
            category=data.category,
            description=data.description,
            date=data.expense_date,
            created_at=data.created_at,
            updated_at=data.updated_at,
        )


class CategoryTotalResponse(BaseModel):
    category: str
    total: float
    count: int


class DailyTotalResponse(BaseModel):
    date: str
    daily_total: float


class ExpenseStatsResponse(BaseModel):
    """Spending breakdown for the current month and the recent trend."""

    monthly_by_category: list[CategoryTotalResponse]
    recent_trend: list[DailyTotalResponse]
