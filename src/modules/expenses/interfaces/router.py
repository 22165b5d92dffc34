"""Expense API routes."""

import datetime

from fastapi import APIRouter, Depends, Query, status

from src.core.application.security import get_current_user_id
from src.core.config import settings
from src.core.interfaces.http.response import ApiResponse, PaginatedResponse
from src.modules.expenses.application.commands import (
    CreateExpenseCommand,
    DeleteExpenseCommand,
    UpdateExpenseCommand,
)
from src.modules.expenses.application.dependencies import (
    get_create_expense_handler,
    get_delete_expense_handler,
    get_expense_query_service,
    get_update_expense_handler,
)
from src.modules.expenses.application.handlers import (
    CreateExpenseHandler,
    DeleteExpenseHandler,
    UpdateExpenseHandler,
)
from src.modules.expenses.application.models import ExpenseData
from src.modules.expenses.application.query_service import ExpenseQueryService
from src.modules.expenses.domain.entities import (
    ExpenseQuery,
    ExpenseSortField,
    SortOrder,
)
from src.modules.expenses.interfaces.schemas import (
    CreateExpenseRequest,
    ExpenseResponse,
    ExpenseStatsResponse,
    UpdateExpenseRequest,
)

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post(
    "",
    response_model=ApiResponse[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create expense",
)
async def create_expense(
    request: CreateExpenseRequest,
    user_id: int = Depends(get_current_user_id),
    handler: CreateExpenseHandler = Depends(get_create_expense_handler),
) -> ApiResponse[ExpenseResponse]:
    command = CreateExpenseCommand(
        user_id=user_id,
        title=request.title,
        amount=request.amount,
        category=request.category,
        description=request.description,
        expense_date=request.date,
    )
    expense = await handler.handle(command)

    return ApiResponse.success(
        data=ExpenseResponse.from_data(ExpenseData.from_entity(expense)),
        message="Expense created successfully",
        code=201,
    )


@router.get(
    "",
    response_model=PaginatedResponse[ExpenseResponse],
    summary="List expenses",
    description="Filter, search, sort and page through the caller's expenses",
)
async def list_expenses(
    page: int = Query(settings.DEFAULT_PAGE, ge=1, description="Page number"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    ),
    sort_by: ExpenseSortField = Query(ExpenseSortField.DATE),
    sort_order: SortOrder = Query(SortOrder.DESC),
    category: str | None = Query(None, description="Exact category"),
    start_date: datetime.date | None = Query(None, description="Inclusive lower bound"),
    end_date: datetime.date | None = Query(None, description="Inclusive upper bound"),
    search: str | None = Query(None, description="Search title and description"),
    user_id: int = Depends(get_current_user_id),
    service: ExpenseQueryService = Depends(get_expense_query_service),
) -> PaginatedResponse[ExpenseResponse]:
    query = ExpenseQuery(
        category=category,
        start_date=start_date,
        end_date=end_date,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    result = await service.list_expenses(user_id, query)

    return PaginatedResponse.create(
        items=[ExpenseResponse.from_data(item) for item in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get(
    "/categories",
    response_model=ApiResponse[list[str]],
    summary="List categories",
)
async def list_categories(
    user_id: int = Depends(get_current_user_id),
    service: ExpenseQueryService = Depends(get_expense_query_service),
) -> ApiResponse[list[str]]:
    categories = await service.list_categories(user_id)
    return ApiResponse.success(data=categories)


@router.get(
    "/stats",
    response_model=ApiResponse[ExpenseStatsResponse],
    summary="Expense statistics",
)
async def get_expense_stats(
    user_id: int = Depends(get_current_user_id),
    service: ExpenseQueryService = Depends(get_expense_query_service),
) -> ApiResponse[ExpenseStatsResponse]:
    stats = await service.get_stats(user_id)
    return ApiResponse.success(data=ExpenseStatsResponse(**stats.model_dump()))


@router.get(
    "/{expense_id}",
    response_model=ApiResponse[ExpenseResponse],
    summary="Get expense",
)
async def get_expense(
    expense_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ExpenseQueryService = Depends(get_expense_query_service),
) -> ApiResponse[ExpenseResponse]:
    expense = await service.get_expense(user_id, expense_id)
    return ApiResponse.success(data=ExpenseResponse.from_data(expense))


@router.put(
    "/{expense_id}",
    response_model=ApiResponse[ExpenseResponse],
    summary="Update expense",
)
async def update_expense(
    expense_id: int,
    request: UpdateExpenseRequest,
    user_id: int = Depends(get_current_user_id),
    handler: UpdateExpenseHandler = Depends(get_update_expense_handler),
) -> ApiResponse[ExpenseResponse]:
    command = UpdateExpenseCommand(
        user_id=user_id,
        expense_id=expense_id,
        title=request.title,
        amount=request.amount,
        category=request.category,
        description=request.description,
        expense_date=request.date,
    )
    expense = await handler.handle(command)

    return ApiResponse.success(
        data=ExpenseResponse.from_data(ExpenseData.from_entity(expense)),
        message="Expense updated successfully",
    )


@router.delete(
    "/{expense_id}",
    response_model=ApiResponse[None],
    summary="Delete expense",
)
async def delete_expense(
    expense_id: int,
    user_id: int = Depends(get_current_user_id),
    handler: DeleteExpenseHandler = Depends(get_delete_expense_handler),
) -> ApiResponse[None]:
    await handler.handle(DeleteExpenseCommand(user_id=user_id, expense_id=expense_id))
    return ApiResponse.success(message="Expense deleted successfully")
