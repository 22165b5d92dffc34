"""Expense application commands."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class CreateExpenseCommand(BaseModel):
    user_id: int
    title: str
    amount: Decimal
    expense_date: date
    category: str | None = None
    description: str | None = None


class UpdateExpenseCommand(BaseModel):
    """Replace an expense's details.

    ``category`` and ``description`` keep their current values when omitted.
    """

    user_id: int
    expense_id: int
    title: str
    amount: Decimal
    expense_date: date
    category: str | None = None
    description: str | None = None


class DeleteExpenseCommand(BaseModel):
    user_id: int
    expense_id: int
