"""API router configuration."""

from fastapi import APIRouter

from src.modules.expenses.interfaces.router import router as expenses_router
from src.modules.users.interfaces.router import router as users_router

api_router = APIRouter()

# Auth and Users
api_router.include_router(users_router)

# Expenses
api_router.include_router(expenses_router)
