"""Expense domain entities and value objects."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from src.core.domain.aggregate_root import AggregateRoot

DEFAULT_CATEGORY = "Other"
CENTS = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class Expense(AggregateRoot):
    """A single expense owned by one user."""

    user_id: int = Field(..., description="Owner user ID")
    title: str = Field(..., min_length=1, max_length=255, description="Title")
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    category: str = Field(default=DEFAULT_CATEGORY, max_length=100)
    description: str = Field(default="", max_length=1000)
    expense_date: date = Field(..., description="Day the money was spent")

    @field_validator("amount", mode="before")
    @classmethod
    def _quantize(cls, value: object) -> object:
        if isinstance(value, int | float | str):
            value = Decimal(str(value))
        if isinstance(value, Decimal):
            return quantize_amount(value)
        return value

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    def update_details(
        self,
        title: str,
        amount: Decimal,
        expense_date: date,
        category: str | None = None,
        description: str | None = None,
    ) -> list[str]:
        """Replace the expense details; ``None`` keeps category/description.

        Returns the names of fields that changed.
        """
        changes: dict[str, object] = {
            "title": title,
            "amount": quantize_amount(amount),
            "expense_date": expense_date,
        }
        if category is not None:
            changes["category"] = category
        if description is not None:
            changes["description"] = description

        updated_fields = [
            name for name, value in changes.items() if getattr(self, name) != value
        ]
        for name in updated_fields:
            setattr(self, name, changes[name])

        if updated_fields:
            self._update_timestamp()
        return updated_fields


class ExpenseSortField(str, Enum):
    DATE = "date"
    AMOUNT = "amount"
    TITLE = "title"
    CATEGORY = "category"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ExpenseQuery(BaseModel):
    """Filter, sort and page parameters for listing a user's expenses."""

    category: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    search: str | None = None
    sort_by: ExpenseSortField = ExpenseSortField.DATE
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class CategoryTotal(BaseModel):
    category: str
    total: Decimal
    count: int


class DailyTotal(BaseModel):
    day: date
    total: Decimal


class ExpenseSummary(BaseModel):
    """All-time totals for one user plus the total since ``month_start``."""

    total_expenses: int = 0
    total_amount: Decimal = Decimal("0")
    average_amount: Decimal = Decimal("0")
    categories_used: int = 0
    monthly_total: Decimal = Decimal("0")
