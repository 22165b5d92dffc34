"""In-memory repositories and collaborators shared by the unit tests."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from decimal import Decimal

from src.modules.expenses.domain.entities import (
    CategoryTotal,
    DailyTotal,
    Expense,
    ExpenseQuery,
    ExpenseSortField,
    ExpenseSummary,
    SortOrder,
)
from src.modules.expenses.domain.repository import ExpenseRepository
from src.modules.users.domain.entities import MagicLink, User
from src.modules.users.domain.exceptions import NotifierUnavailableError
from src.modules.users.domain.repository import MagicLinkRepository, UserRepository


class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    def __init__(self, users: dict[int, User] | None = None) -> None:
        self.users = users or {}
        self._next_id = max(self.users, default=0) + 1

    async def get_by_id(self, user_id: int) -> User | None:
        user = self.users.get(user_id)
        return user if user and not user.is_deleted else None

    async def get_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email and not user.is_deleted:
                return user
        return None

    async def get_or_create_by_email(self, email: str) -> tuple[User, bool]:
        existing = await self.get_by_email(email)
        if existing:
            return existing, False
        return await self.create(User(email=email)), True

    async def create(self, user: User) -> User:
        user.id = self._next_id
        self._next_id += 1
        self.users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        self.users[user.id] = user
        return user


class InMemoryMagicLinkRepository(MagicLinkRepository):
    """In-memory credential store.

    ``consume`` yields to the event loop before its check-and-set so that
    concurrent redemptions really interleave.
    """

    def __init__(self) -> None:
        self.links: dict[int, MagicLink] = {}
        self._next_id = 1

    async def get_by_id(self, magic_link_id: int) -> MagicLink | None:
        return self.links.get(magic_link_id)

    async def get_by_token(self, token: str) -> MagicLink | None:
        for link in self.links.values():
            if link.token == token:
                return link
        return None

    async def consume(self, token: str, now: datetime) -> MagicLink | None:
        await asyncio.sleep(0)
        link = await self.get_by_token(token)
        if link is None or not link.is_redeemable(now):
            return None
        link.mark_as_used(now)
        return link

    async def create(self, magic_link: MagicLink) -> MagicLink:
        magic_link.id = self._next_id
        self._next_id += 1
        self.links[magic_link.id] = magic_link
        return magic_link

    async def update(self, magic_link: MagicLink) -> MagicLink:
        self.links[magic_link.id] = magic_link
        return magic_link


class InMemoryExpenseRepository(ExpenseRepository):
    """In-memory expense repository for tests."""

    def __init__(self) -> None:
        self.expenses: dict[int, Expense] = {}
        self._next_id = 1

    def _live(self, user_id: int) -> list[Expense]:
        return [
            expense
            for expense in self.expenses.values()
            if expense.user_id == user_id and not expense.is_deleted
        ]

    async def get_by_id(self, expense_id: int) -> Expense | None:
        expense = self.expenses.get(expense_id)
        return expense if expense and not expense.is_deleted else None

    async def get_for_user(self, expense_id: int, user_id: int) -> Expense | None:
        expense = await self.get_by_id(expense_id)
        return expense if expense and expense.is_owned_by(user_id) else None

    async def create(self, expense: Expense) -> Expense:
        expense.id = self._next_id
        self._next_id += 1
        self.expenses[expense.id] = expense
        return expense

    async def update(self, expense: Expense) -> Expense:
        self.expenses[expense.id] = expense
        return expense

    async def delete(self, expense: Expense) -> bool:
        stored = self.expenses.get(expense.id)
        if not stored or stored.is_deleted:
            return False
        stored.mark_as_deleted()
        return True

    async def list_by_user(
        self, user_id: int, query: ExpenseQuery
    ) -> tuple[list[Expense], int]:
        matches = self._live(user_id)
        if query.category:
            matches = [e for e in matches if e.category == query.category]
        if query.start_date:
            matches = [e for e in matches if e.expense_date >= query.start_date]
        if query.end_date:
            matches = [e for e in matches if e.expense_date <= query.end_date]
        if query.search:
            needle = query.search.lower()
            matches = [
                e
                for e in matches
                if needle in e.title.lower() or needle in e.description.lower()
            ]

        attribute = {
            ExpenseSortField.DATE: "expense_date",
            ExpenseSortField.AMOUNT: "amount",
            ExpenseSortField.TITLE: "title",
            ExpenseSortField.CATEGORY: "category",
            ExpenseSortField.CREATED_AT: "created_at",
        }[query.sort_by]
        matches.sort(key=lambda e: e.id, reverse=True)
        matches.sort(
            key=lambda e: getattr(e, attribute),
            reverse=query.sort_order == SortOrder.DESC,
        )

        page = matches[query.offset : query.offset + query.page_size]
        return page, len(matches)

    async def list_categories(self, user_id: int) -> list[str]:
        return sorted({expense.category for expense in self._live(user_id)})

    async def totals_by_category(
        self, user_id: int, since: date
    ) -> list[CategoryTotal]:
        totals: dict[str, CategoryTotal] = {}
        for expense in self._live(user_id):
            if expense.expense_date < since:
                continue
            current = totals.get(expense.category) or CategoryTotal(
                category=expense.category, total=Decimal("0"), count=0
            )
            totals[expense.category] = CategoryTotal(
                category=expense.category,
                total=current.total + expense.amount,
                count=current.count + 1,
            )
        return sorted(totals.values(), key=lambda row: (-row.total, row.category))

    async def daily_totals(self, user_id: int, since: date) -> list[DailyTotal]:
        totals: dict[date, Decimal] = {}
        for expense in self._live(user_id):
            if expense.expense_date >= since:
                totals[expense.expense_date] = (
                    totals.get(expense.expense_date, Decimal("0")) + expense.amount
                )
        return [DailyTotal(day=day, total=totals[day]) for day in sorted(totals)]

    async def summarize(self, user_id: int, month_start: date) -> ExpenseSummary:
        expenses = self._live(user_id)
        if not expenses:
            return ExpenseSummary()
        total = sum((e.amount for e in expenses), Decimal("0"))
        return ExpenseSummary(
            total_expenses=len(expenses),
            total_amount=total,
            average_amount=total / len(expenses),
            categories_used=len({e.category for e in expenses}),
            monthly_total=sum(
                (e.amount for e in expenses if e.expense_date >= month_start),
                Decimal("0"),
            ),
        )


class RecordingNotifier:
    """Magic link notifier that records deliveries or refuses them."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.sent: list[tuple[str, str, datetime]] = []

    async def send_magic_link(
        self, email: str, link: str, expires_at: datetime
    ) -> None:
        if not self.available:
            raise NotifierUnavailableError("Email delivery is disabled or not configured")
        self.sent.append((email, link, expires_at))
