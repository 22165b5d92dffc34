"""User module application dependencies.

Defines dependency providers for the interfaces layer without importing
infrastructure. The repository, notifier and token service stubs are
overridden in main.py.
"""

from typing import NoReturn

from fastapi import Depends

from src.core.config import settings
from src.core.domain.ports.token import TokenService
from src.modules.expenses.application.dependencies import get_expense_repository
from src.modules.expenses.domain.repository import ExpenseRepository
from src.modules.users.application.handlers import (
    RedeemMagicLinkHandler,
    RequestMagicLinkHandler,
    UpdateProfileHandler,
)
from src.modules.users.application.query_service import UserQueryService
from src.modules.users.application.stats_service import UserStatsService
from src.modules.users.domain.ports import MagicLinkNotifier
from src.modules.users.domain.repository import MagicLinkRepository, UserRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_user_repository() -> UserRepository:
    _missing_dependency("UserRepository")


async def get_magic_link_repository() -> MagicLinkRepository:
    _missing_dependency("MagicLinkRepository")


async def get_token_service() -> TokenService:
    _missing_dependency("TokenService")


async def get_magic_link_notifier() -> MagicLinkNotifier:
    _missing_dependency("MagicLinkNotifier")


async def get_request_magic_link_handler(
    magic_link_repository: MagicLinkRepository = Depends(get_magic_link_repository),
    notifier: MagicLinkNotifier = Depends(get_magic_link_notifier),
) -> RequestMagicLinkHandler:
    return RequestMagicLinkHandler(
        magic_link_repository,
        notifier,
        verify_url=settings.magic_link_verify_url,
        expire_minutes=settings.MAGIC_LINK_EXPIRE_MINUTES,
        token_bytes=settings.MAGIC_LINK_TOKEN_BYTES,
        expose_link=settings.expose_magic_links,
    )


async def get_redeem_magic_link_handler(
    user_repository: UserRepository = Depends(get_user_repository),
    magic_link_repository: MagicLinkRepository = Depends(get_magic_link_repository),
    token_service: TokenService = Depends(get_token_service),
) -> RedeemMagicLinkHandler:
    return RedeemMagicLinkHandler(user_repository, magic_link_repository, token_service)


async def get_update_profile_handler(
    user_repository: UserRepository = Depends(get_user_repository),
) -> UpdateProfileHandler:
    return UpdateProfileHandler(user_repository)


async def get_user_query_service(
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserQueryService:
    return UserQueryService(user_repository)


async def get_user_stats_service(
    expense_repository: ExpenseRepository = Depends(get_expense_repository),
) -> UserStatsService:
    return UserStatsService(expense_repository)
