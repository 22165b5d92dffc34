"""Expense domain exceptions."""

from src.core.domain.exceptions import EntityNotFoundError, ValidationError


class ExpenseNotFoundError(EntityNotFoundError):
    """Raised when an expense does not exist or belongs to another user."""

    def __init__(self, expense_id: int | None = None) -> None:
        super().__init__("Expense", expense_id)


class InvalidDateRangeError(ValidationError):
    def __init__(self) -> None:
        super().__init__("start_date must not be after end_date")
