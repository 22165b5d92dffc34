"""Expense command handlers."""

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.expenses.application.commands import (
    CreateExpenseCommand,
    DeleteExpenseCommand,
    UpdateExpenseCommand,
)
from src.modules.expenses.domain.entities import DEFAULT_CATEGORY, Expense
from src.modules.expenses.domain.exceptions import ExpenseNotFoundError
from src.modules.expenses.domain.repository import ExpenseRepository


class CreateExpenseHandler:
    """Handle expense creation."""

    def __init__(self, expense_repository: ExpenseRepository):
        self.expense_repository = expense_repository
        self.logger = logger

    async def handle(self, command: CreateExpenseCommand) -> Expense:
        expense = Expense(
            user_id=command.user_id,
            title=command.title,
            amount=command.amount,
            category=command.category or DEFAULT_CATEGORY,
            description=command.description or "",
            expense_date=command.expense_date,
        )
        expense = await self.expense_repository.create(expense)

        BusinessEvents.expense_created(
            user_id=expense.user_id,
            expense_id=expense.id,
            amount=str(expense.amount),
            category=expense.category,
        )
        return expense


class UpdateExpenseHandler:
    """Handle expense update."""

    def __init__(self, expense_repository: ExpenseRepository):
        self.expense_repository = expense_repository
        self.logger = logger

    async def handle(self, command: UpdateExpenseCommand) -> Expense:
        expense = await self.expense_repository.get_for_user(
            command.expense_id, command.user_id
        )
        if not expense:
            raise ExpenseNotFoundError(command.expense_id)

        updated_fields = expense.update_details(
            title=command.title,
            amount=command.amount,
            expense_date=command.expense_date,
            category=command.category,
            description=command.description,
        )
        if not updated_fields:
            return expense

        expense = await self.expense_repository.update(expense)
        BusinessEvents.expense_updated(
            user_id=expense.user_id,
            expense_id=expense.id,
            updated_fields=updated_fields,
        )
        return expense


class DeleteExpenseHandler:
    """Handle expense deletion (soft delete)."""

    def __init__(self, expense_repository: ExpenseRepository):
        self.expense_repository = expense_repository
        self.logger = logger

    async def handle(self, command: DeleteExpenseCommand) -> None:
        expense = await self.expense_repository.get_for_user(
            command.expense_id, command.user_id
        )
        if not expense:
            raise ExpenseNotFoundError(command.expense_id)

        await self.expense_repository.delete(expense)
        self.logger.info(f"Deleted expense {expense.id} of user {expense.user_id}")
        BusinessEvents.expense_deleted(user_id=expense.user_id, expense_id=expense.id)
